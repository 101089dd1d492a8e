# models/team.py

from extensions import db

class Team(db.Model):
    __tablename__ = 'teams'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    description = db.Column(db.Text, nullable=True)
    # A team can only be evaluated once this is set
    problem_statement_id = db.Column(db.Integer, db.ForeignKey('problem_statements.id'), nullable=True)

    evaluations = db.relationship('Evaluation', backref='team', lazy=True, cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'problem_statement_id': self.problem_statement_id,
        }
