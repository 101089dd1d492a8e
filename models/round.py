# models/round.py

from extensions import db

class Round(db.Model):
    __tablename__ = 'rounds'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    sequence = db.Column(db.Integer, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=False)

    parameters = db.relationship('Parameter', backref='round', lazy=True,
                                 order_by='Parameter.id', cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'sequence': self.sequence,
            'is_active': bool(self.is_active),
        }
