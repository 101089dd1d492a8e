# models/problem_statement.py

from extensions import db

class ProblemStatement(db.Model):
    __tablename__ = 'problem_statements'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String, nullable=False)
    theme = db.Column(db.String, nullable=True)
    description = db.Column(db.Text, nullable=True)

    teams = db.relationship('Team', backref='problem_statement', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'theme': self.theme,
            'description': self.description,
        }
