# routes/main.py
# Read endpoints and the evaluation lifecycle

from flask import Blueprint, jsonify, request, current_app
import repository
from errors import NotFoundError, ValidationError
from routes.helpers import json_body, parse_id, optional_id, optional_text

main_bp = Blueprint('main', __name__, url_prefix='/api')


@main_bp.route('/evaluators', methods=['GET'])
def list_evaluators():
    return jsonify([e.to_dict() for e in repository.list_evaluators()])


@main_bp.route('/teams', methods=['GET'])
def list_teams():
    return jsonify([t.to_dict() for t in repository.list_teams()])


@main_bp.route('/problem-statements', methods=['GET'])
def list_problem_statements():
    return jsonify([ps.to_dict() for ps in repository.list_problem_statements()])


@main_bp.route('/rounds', methods=['GET'])
def list_rounds():
    return jsonify([r.to_dict() for r in repository.list_rounds()])


@main_bp.route('/parameters', methods=['GET'])
def list_parameters():
    round_id = request.args.get('round_id')
    if round_id:
        round_id = parse_id(round_id, 'round_id')
    else:
        round_id = None
    return jsonify([p.to_dict() for p in repository.list_parameters(round_id)])


@main_bp.route('/evaluations', methods=['GET'])
def list_evaluations():
    return jsonify(repository.list_evaluations())


@main_bp.route('/evaluations/lookup', methods=['GET'])
def lookup_evaluation():
    team_id = parse_id(request.args.get('team_id'), 'team_id')
    round_id = parse_id(request.args.get('round_id'), 'round_id')
    evaluator_id = parse_id(request.args.get('evaluator_id'), 'evaluator_id')

    evaluation = repository.find_evaluation(team_id, round_id, evaluator_id)
    if evaluation is None:
        raise NotFoundError('Evaluation not found')
    return jsonify(evaluation.to_dict())


def _scores_from(data):
    scores = data.get('scores', {})
    if not isinstance(scores, dict):
        raise ValidationError('scores must be an object of {parameter_id: score}')
    return scores


@main_bp.route('/evaluations', methods=['POST'])
def save_evaluation():
    data = json_body()
    evaluation_id, created = repository.upsert_evaluation(
        team_id=parse_id(data.get('team_id'), 'team_id'),
        round_id=parse_id(data.get('round_id'), 'round_id'),
        evaluator_id=parse_id(data.get('evaluator_id'), 'evaluator_id'),
        problem_statement_id=optional_id(data, 'problem_statement_id'),
        scores=_scores_from(data),
        feedback=optional_text(data, 'feedback'),
        total_score=data.get('total_score'),
    )
    current_app.logger.info('Evaluation %s %s', evaluation_id, 'created' if created else 'updated')
    return jsonify({'id': evaluation_id, 'created': created})


@main_bp.route('/evaluations/<raw_id>', methods=['PUT'])
def update_evaluation(raw_id):
    evaluation_id = parse_id(raw_id, 'ID')
    data = json_body()
    repository.update_evaluation(
        evaluation_id,
        scores=_scores_from(data),
        feedback=optional_text(data, 'feedback'),
        total_score=data.get('total_score'),
    )
    return jsonify({'success': True})


@main_bp.route('/evaluations/<raw_id>', methods=['DELETE'])
def delete_evaluation(raw_id):
    current_app.logger.info('Request to delete evaluation with ID: %s', raw_id)
    # Rejected before the database is touched
    evaluation_id = parse_id(raw_id, 'ID')

    deleted = repository.delete_evaluation(evaluation_id)
    current_app.logger.info('Delete of evaluation %s removed %s row(s)', evaluation_id, deleted)
    if deleted == 0:
        raise NotFoundError('Evaluation not found')
    return jsonify({'success': True})
