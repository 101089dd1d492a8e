from extensions import db
from sqlalchemy import CheckConstraint

class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String, unique=True, nullable=False)
    password = db.Column(db.String, nullable=False)
    role = db.Column(db.String, nullable=False)
    # Set only for judges
    evaluator_id = db.Column(db.Integer, db.ForeignKey('evaluators.id'), nullable=True)

    evaluator = db.relationship('Evaluator')

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'judge')", name="check_role"),
    )

    def to_dict(self):
        # The password never leaves the server
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'evaluator_id': self.evaluator_id,
        }
