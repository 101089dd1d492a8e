"""
Scoring repository: reads and writes for every entity of the portal.

Plain functions over db.session. Writes commit before returning and roll the
session back on failure; integrity problems surface as the PortalError
subclasses from errors.py so the API layer only maps them to responses.
"""

import math

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import ConflictError, NotFoundError, StorageError, ValidationError
from extensions import db
from models import Evaluation, Evaluator, Parameter, ProblemStatement, Round, Team, User
from models.evaluation import utc_now
from score_map import encode_scores, normalize_scores, total_of

# Tolerance when checking a submitted total against the sum of its scores
TOTAL_EPSILON = 1e-9


def _commit(operation):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Storage failure during %s', operation)
        raise StorageError()


# --- Reads ---

def list_evaluators():
    return Evaluator.query.order_by(Evaluator.id).all()


def list_users():
    return User.query.order_by(User.id).all()


def list_teams():
    return Team.query.order_by(Team.id).all()


def list_problem_statements():
    return ProblemStatement.query.order_by(ProblemStatement.id).all()


def list_rounds(ordered_by_sequence=True):
    query = Round.query
    if ordered_by_sequence:
        return query.order_by(Round.sequence, Round.id).all()
    return query.order_by(Round.id).all()


def list_parameters(round_id=None):
    query = Parameter.query
    if round_id is not None:
        query = query.filter_by(round_id=round_id)
    return query.order_by(Parameter.id).all()


def get_user_by_credentials(username, password):
    # Plaintext comparison, exact match on both fields
    return User.query.filter_by(username=username, password=password).first()


def get_team(team_id):
    return db.session.get(Team, team_id)


def get_round(round_id):
    return db.session.get(Round, round_id)


def get_evaluation(evaluation_id):
    return db.session.get(Evaluation, evaluation_id)


def find_evaluation(team_id, round_id, evaluator_id):
    return Evaluation.query.filter_by(
        team_id=team_id, round_id=round_id, evaluator_id=evaluator_id
    ).first()


def list_evaluations():
    """All evaluations, newest first, with the display names of what they reference.

    The problem statement is a left join: ps_title is None for evaluations
    stored without one.
    """
    rows = db.session.query(
        Evaluation,
        Team.name.label('team_name'),
        Round.name.label('round_name'),
        Evaluator.name.label('evaluator_name'),
        ProblemStatement.title.label('ps_title'),
    ).join(Team, Evaluation.team_id == Team.id) \
     .join(Round, Evaluation.round_id == Round.id) \
     .join(Evaluator, Evaluation.evaluator_id == Evaluator.id) \
     .outerjoin(ProblemStatement, Evaluation.problem_statement_id == ProblemStatement.id) \
     .order_by(Evaluation.created_at.desc(), Evaluation.id.desc()) \
     .all()

    result = []
    for evaluation, team_name, round_name, evaluator_name, ps_title in rows:
        item = evaluation.to_dict()
        item.update(team_name=team_name, round_name=round_name,
                    evaluator_name=evaluator_name, ps_title=ps_title)
        result.append(item)
    return result


# --- Reference data writes ---

def create_evaluator(name):
    evaluator = Evaluator(name=name)
    db.session.add(evaluator)
    _commit('create_evaluator')
    return evaluator.id


def create_team(name, description=None):
    team = Team(name=name, description=description)
    db.session.add(team)
    _commit('create_team')
    return team.id


def assign_problem_statement(team_id, problem_statement_id):
    # The problem statement itself is not looked up; callers check it exists
    team = get_team(team_id)
    if team is None:
        raise NotFoundError(f'Team {team_id} not found')
    team.problem_statement_id = problem_statement_id
    _commit('assign_problem_statement')


def create_problem_statement(title, theme=None, description=None):
    statement = ProblemStatement(title=title, theme=theme, description=description)
    db.session.add(statement)
    _commit('create_problem_statement')
    return statement.id


def create_round(name, sequence):
    new_round = Round(name=name, sequence=sequence, is_active=False)
    db.session.add(new_round)
    _commit('create_round')
    return new_round.id


def set_active_round(round_id, active):
    """Activate or deactivate a round.

    Activation clears every other round first. Both writes go out in one
    transaction, so a failure leaves the previous active round in place.
    """
    target = get_round(round_id)
    if target is None:
        raise NotFoundError(f'Round {round_id} not found')

    if active:
        db.session.query(Round).update({Round.is_active: False}, synchronize_session='fetch')
    target.is_active = bool(active)
    _commit('set_active_round')


def create_parameter(round_id, name, max_score=10):
    if get_round(round_id) is None:
        raise ValidationError(f'Round {round_id} does not exist')
    if isinstance(max_score, bool) or not isinstance(max_score, int) or max_score <= 0:
        raise ValidationError('max_score must be a positive integer')
    parameter = Parameter(round_id=round_id, name=name, max_score=max_score)
    db.session.add(parameter)
    _commit('create_parameter')
    return parameter.id


# --- Evaluations ---

def check_scores(round_id, scores, total_score=None):
    """Validate a score map against the rubric of a round.

    Returns the normalized map and the total to store. A supplied total must
    equal the sum of the scores; a missing one is computed.
    """
    try:
        scores = normalize_scores(scores)
    except ValueError as e:
        raise ValidationError(str(e))

    parameters = {p.id: p for p in list_parameters(round_id)}
    for parameter_id, value in scores.items():
        parameter = parameters.get(parameter_id)
        if parameter is None:
            raise ValidationError(f'Parameter {parameter_id} is not part of round {round_id}')
        if value < 0 or value > parameter.max_score:
            raise ValidationError(
                f'Score for "{parameter.name}" must be between 0 and {parameter.max_score}'
            )

    total = total_of(scores)
    if total_score is None:
        return scores, total
    if isinstance(total_score, bool) or not isinstance(total_score, (int, float)):
        raise ValidationError('total_score must be a number')
    if isinstance(total_score, float) and not math.isfinite(total_score):
        raise ValidationError('total_score must be a finite number')
    try:
        mismatch = abs(total_score - total) > TOTAL_EPSILON
    except OverflowError:
        mismatch = True
    if mismatch:
        raise ValidationError(f'total_score {total_score} does not match the sum of scores ({total})')
    return scores, total_score


def _check_references(team_id, round_id, evaluator_id):
    team = get_team(team_id)
    if team is None:
        raise ValidationError(f'Team {team_id} does not exist')
    if get_round(round_id) is None:
        raise ValidationError(f'Round {round_id} does not exist')
    if db.session.get(Evaluator, evaluator_id) is None:
        raise ValidationError(f'Evaluator {evaluator_id} does not exist')
    return team


def _new_evaluation(team, round_id, evaluator_id, problem_statement_id,
                    scores, feedback, total_score):
    # Without an explicit problem statement the team's current one is recorded
    if problem_statement_id is None:
        problem_statement_id = team.problem_statement_id
    return Evaluation(
        team_id=team.id,
        round_id=round_id,
        evaluator_id=evaluator_id,
        problem_statement_id=problem_statement_id,
        scores=encode_scores(scores),
        feedback=feedback,
        total_score=total_score,
    )


def create_evaluation(team_id, round_id, evaluator_id, problem_statement_id,
                      scores, feedback=None, total_score=None):
    team = _check_references(team_id, round_id, evaluator_id)
    if find_evaluation(team_id, round_id, evaluator_id) is not None:
        raise ConflictError('An evaluation already exists for this team, round and evaluator')
    scores, total_score = check_scores(round_id, scores, total_score)

    evaluation = _new_evaluation(team, round_id, evaluator_id, problem_statement_id,
                                 scores, feedback, total_score)
    db.session.add(evaluation)
    try:
        _commit('create_evaluation')
    except IntegrityError:
        raise ConflictError('An evaluation already exists for this team, round and evaluator')
    return evaluation.id


def _apply_update(evaluation, scores, feedback, total_score):
    evaluation.scores = encode_scores(scores)
    evaluation.feedback = feedback
    evaluation.total_score = total_score
    evaluation.created_at = utc_now()


def update_evaluation(evaluation_id, scores, feedback=None, total_score=None):
    evaluation = get_evaluation(evaluation_id)
    if evaluation is None:
        raise NotFoundError('Evaluation not found')
    scores, total_score = check_scores(evaluation.round_id, scores, total_score)
    _apply_update(evaluation, scores, feedback, total_score)
    _commit('update_evaluation')


def upsert_evaluation(team_id, round_id, evaluator_id, problem_statement_id,
                      scores, feedback=None, total_score=None):
    """Create or overwrite the evaluation of a (team, round, evaluator) triple.

    Returns (id, created).
    """
    team = _check_references(team_id, round_id, evaluator_id)
    scores, total_score = check_scores(round_id, scores, total_score)

    existing = find_evaluation(team_id, round_id, evaluator_id)
    if existing is not None:
        _apply_update(existing, scores, feedback, total_score)
        _commit('upsert_evaluation')
        return existing.id, False

    evaluation = _new_evaluation(team, round_id, evaluator_id, problem_statement_id,
                                 scores, feedback, total_score)
    db.session.add(evaluation)
    try:
        _commit('upsert_evaluation')
    except IntegrityError:
        # A concurrent submit inserted the row first; overwrite it instead
        existing = find_evaluation(team_id, round_id, evaluator_id)
        if existing is None:
            current_app.logger.exception('Integrity failure while saving evaluation')
            raise StorageError()
        _apply_update(existing, scores, feedback, total_score)
        _commit('upsert_evaluation')
        return existing.id, False
    return evaluation.id, True


def delete_evaluation(evaluation_id):
    """Delete by id. Returns the number of rows removed (0 when absent)."""
    count = Evaluation.query.filter_by(id=evaluation_id).delete()
    _commit('delete_evaluation')
    return count
