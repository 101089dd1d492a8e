# routes/admin.py
# Setup endpoints: teams, problem statements, rounds, rubric parameters, evaluators

from flask import Blueprint, jsonify, current_app
import repository
from errors import ValidationError
from routes.helpers import json_body, parse_id, optional_id, required_text, optional_text, required_int

admin_bp = Blueprint('admin', __name__, url_prefix='/api')


@admin_bp.route('/teams', methods=['POST'])
def create_team():
    data = json_body()
    team_id = repository.create_team(required_text(data, 'name'), optional_text(data, 'description'))
    return jsonify({'id': team_id})


@admin_bp.route('/teams/<raw_id>/assign-ps', methods=['POST'])
def assign_problem_statement(raw_id):
    team_id = parse_id(raw_id, 'team id')
    data = json_body()
    problem_statement_id = optional_id(data, 'problem_statement_id')
    repository.assign_problem_statement(team_id, problem_statement_id)
    current_app.logger.info('Team %s assigned problem statement %s', team_id, problem_statement_id)
    return jsonify({'success': True})


@admin_bp.route('/problem-statements', methods=['POST'])
def create_problem_statement():
    data = json_body()
    statement_id = repository.create_problem_statement(
        required_text(data, 'title'),
        optional_text(data, 'theme'),
        optional_text(data, 'description'),
    )
    return jsonify({'id': statement_id})


@admin_bp.route('/rounds', methods=['POST'])
def create_round():
    data = json_body()
    round_id = repository.create_round(required_text(data, 'name'), required_int(data, 'sequence'))
    return jsonify({'id': round_id})


@admin_bp.route('/rounds/<raw_id>/toggle-active', methods=['POST'])
def toggle_round_active(raw_id):
    round_id = parse_id(raw_id, 'round id')
    data = json_body()
    if 'is_active' not in data:
        raise ValidationError('is_active is required')
    is_active = data['is_active']
    if is_active not in (True, False, 0, 1):
        raise ValidationError('is_active must be a boolean')

    repository.set_active_round(round_id, bool(is_active))
    current_app.logger.info('Round %s active=%s', round_id, bool(is_active))
    return jsonify({'success': True})


@admin_bp.route('/parameters', methods=['POST'])
def create_parameter():
    data = json_body()
    parameter_id = repository.create_parameter(
        parse_id(data.get('round_id'), 'round_id'),
        required_text(data, 'name'),
        required_int(data, 'max_score'),
    )
    return jsonify({'id': parameter_id})


@admin_bp.route('/evaluators', methods=['POST'])
def create_evaluator():
    data = json_body()
    return jsonify({'id': repository.create_evaluator(required_text(data, 'name'))})


@admin_bp.route('/users', methods=['GET'])
def list_users():
    return jsonify([u.to_dict() for u in repository.list_users()])
