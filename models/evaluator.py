# models/evaluator.py

from extensions import db

class Evaluator(db.Model):
    __tablename__ = 'evaluators'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}
