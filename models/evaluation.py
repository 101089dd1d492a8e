# models/evaluation.py

from datetime import datetime, timezone
from extensions import db
from score_map import decode_scores


def utc_now():
    # Naive UTC, the form SQLite DateTime columns round-trip
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Evaluation(db.Model):
    __tablename__ = 'evaluations'
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    round_id = db.Column(db.Integer, db.ForeignKey('rounds.id', ondelete='CASCADE'), nullable=False)
    evaluator_id = db.Column(db.Integer, db.ForeignKey('evaluators.id', ondelete='CASCADE'), nullable=False)
    problem_statement_id = db.Column(db.Integer, db.ForeignKey('problem_statements.id'), nullable=True)
    # JSON text {parameter_id: score}, see score_map.py
    scores = db.Column(db.Text, nullable=False, default='{}')
    feedback = db.Column(db.Text, nullable=True)
    total_score = db.Column(db.Float, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    round = db.relationship('Round')
    evaluator = db.relationship('Evaluator')

    # One evaluation per judge, team and round
    __table_args__ = (
        db.UniqueConstraint('team_id', 'round_id', 'evaluator_id', name='unique_team_round_evaluator'),
    )

    @property
    def score_map(self):
        return decode_scores(self.scores)

    def to_dict(self):
        return {
            'id': self.id,
            'team_id': self.team_id,
            'round_id': self.round_id,
            'evaluator_id': self.evaluator_id,
            'problem_statement_id': self.problem_statement_id,
            'scores': self.score_map,
            'feedback': self.feedback,
            'total_score': self.total_score,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
