"""
Standings and statistics derived from the evaluation list.

Everything here works on the JSON rows the API returns (lists of dicts) and
is recomputed from the full list on every call.
"""

from collections import defaultdict


def _team_totals(evaluations, round_id=None):
    totals = defaultdict(float)
    for e in evaluations:
        if round_id is None or e['round_id'] == round_id:
            totals[e['team_id']] += e.get('total_score') or 0
    return totals


def _leaderboard(teams, totals, limit):
    # Every team is ranked, unscored ones with 0; sorted() keeps team order on ties
    board = [{'team_id': t['id'], 'name': t['name'], 'score': totals.get(t['id'], 0)} for t in teams]
    board = sorted(board, key=lambda row: row['score'], reverse=True)
    return board[:limit] if limit is not None else board


def round_leaderboard(evaluations, teams, round_id, limit=5):
    return _leaderboard(teams, _team_totals(evaluations, round_id), limit)


def overall_leaderboard(evaluations, teams, limit=10):
    return _leaderboard(teams, _team_totals(evaluations), limit)


def round_average(evaluations, round_id):
    scores = [e.get('total_score') or 0 for e in evaluations if e['round_id'] == round_id]
    if not scores:
        return 0
    return sum(scores) / len(scores)


def round_averages(evaluations, rounds):
    return [{'round_id': r['id'], 'name': r['name'], 'average': round_average(evaluations, r['id'])}
            for r in rounds]


def problem_statement_distribution(teams, problem_statements):
    """Teams per problem statement. Statements nobody picked are omitted."""
    by_statement = defaultdict(list)
    for team in teams:
        if team.get('problem_statement_id'):
            by_statement[team['problem_statement_id']].append(team['name'])

    distribution = []
    for ps in problem_statements:
        names = by_statement.get(ps['id'])
        if names:
            distribution.append({
                'problem_statement_id': ps['id'],
                'title': ps['title'],
                'theme': ps.get('theme'),
                'count': len(names),
                'teams': names,
            })
    return distribution


def filter_evaluations(evaluations, search='', evaluator_id=None, problem_statement_id=None):
    search = (search or '').lower()
    return [
        e for e in evaluations
        if search in (e.get('team_name') or '').lower()
        and (evaluator_id is None or e['evaluator_id'] == evaluator_id)
        and (problem_statement_id is None or e.get('problem_statement_id') == problem_statement_id)
    ]


def summary(evaluations, teams):
    totals = [e.get('total_score') or 0 for e in evaluations]
    return {
        'evaluations': len(evaluations),
        'teams': len(teams),
        'average_score': round(sum(totals) / len(totals), 1) if totals else 0,
    }
