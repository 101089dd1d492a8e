# models/parameter.py
# One rubric line of a round

from extensions import db
from sqlalchemy import CheckConstraint

class Parameter(db.Model):
    __tablename__ = 'parameters'
    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey('rounds.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    max_score = db.Column(db.Integer, nullable=False, default=10)

    __table_args__ = (
        CheckConstraint("max_score > 0", name="check_max_score"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'round_id': self.round_id,
            'name': self.name,
            'max_score': self.max_score,
        }
