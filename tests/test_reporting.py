import reporting
import repository

TEAMS = [
    {'id': 1, 'name': 'Codestorm', 'problem_statement_id': 12},
    {'id': 2, 'name': 'MARS', 'problem_statement_id': 8},
    {'id': 3, 'name': 'Rebels', 'problem_statement_id': 12},
    {'id': 4, 'name': 'Night Owls', 'problem_statement_id': None},
]

PROBLEM_STATEMENTS = [
    {'id': 8, 'title': 'The Skill Translator', 'theme': 'Future of Works and Careers'},
    {'id': 12, 'title': 'GuardianLink', 'theme': 'Learning & Skill Development'},
    {'id': 15, 'title': 'CarbonSync', 'theme': 'Sustainable & Green Solutions'},
]


def _evaluation(team_id, round_id, evaluator_id, total, team_name=None, ps=None):
    return {'team_id': team_id, 'round_id': round_id, 'evaluator_id': evaluator_id,
            'total_score': total, 'team_name': team_name, 'problem_statement_id': ps}


EVALUATIONS = [
    _evaluation(1, 1, 1, 24, 'Codestorm', 12),
    _evaluation(1, 1, 2, 26, 'Codestorm', 12),
    _evaluation(2, 1, 1, 14, 'MARS', 8),
    _evaluation(3, 1, 2, 30, 'Rebels', 12),
    _evaluation(2, 2, 1, 20, 'MARS', 8),
]


def test_round_leaderboard_sums_per_team():
    board = reporting.round_leaderboard(EVALUATIONS, TEAMS, round_id=1)
    assert [(row['name'], row['score']) for row in board] == [
        ('Codestorm', 50), ('Rebels', 30), ('MARS', 14), ('Night Owls', 0),
    ]


def test_round_leaderboard_keeps_top_n():
    board = reporting.round_leaderboard(EVALUATIONS, TEAMS, round_id=1, limit=2)
    assert [row['name'] for row in board] == ['Codestorm', 'Rebels']


def test_overall_leaderboard_spans_rounds():
    board = reporting.overall_leaderboard(EVALUATIONS, TEAMS)
    assert [(row['name'], row['score']) for row in board][:3] == [
        ('Codestorm', 50), ('MARS', 34), ('Rebels', 30),
    ]


def test_ties_keep_team_order():
    evaluations = [_evaluation(2, 1, 1, 10), _evaluation(1, 1, 1, 10)]
    board = reporting.overall_leaderboard(evaluations, TEAMS, limit=2)
    assert [row['name'] for row in board] == ['Codestorm', 'MARS']


def test_round_average():
    assert reporting.round_average(EVALUATIONS, 1) == (24 + 26 + 14 + 30) / 4
    assert reporting.round_average(EVALUATIONS, 3) == 0


def test_round_averages_follow_rounds():
    rounds = [{'id': 1, 'name': 'Round 1'}, {'id': 2, 'name': 'Round 2'}]
    assert [row['average'] for row in reporting.round_averages(EVALUATIONS, rounds)] == [23.5, 20]


def test_problem_statement_distribution_skips_unpicked():
    distribution = reporting.problem_statement_distribution(TEAMS, PROBLEM_STATEMENTS)
    assert [(row['title'], row['count']) for row in distribution] == [
        ('The Skill Translator', 1), ('GuardianLink', 2),
    ]
    assert distribution[1]['teams'] == ['Codestorm', 'Rebels']


def test_filter_evaluations():
    assert len(reporting.filter_evaluations(EVALUATIONS, search='code')) == 2
    assert len(reporting.filter_evaluations(EVALUATIONS, evaluator_id=2)) == 2
    assert len(reporting.filter_evaluations(EVALUATIONS, problem_statement_id=8)) == 2
    assert reporting.filter_evaluations(EVALUATIONS, search='mars', evaluator_id=2) == []


def test_summary():
    assert reporting.summary(EVALUATIONS, TEAMS) == {'evaluations': 5, 'teams': 4, 'average_score': 22.8}
    assert reporting.summary([], TEAMS)['average_score'] == 0


def test_standings_from_recorded_history(seeded_app):
    with seeded_app.app_context():
        evaluations = repository.list_evaluations()
        teams = [t.to_dict() for t in repository.list_teams()]
        first_round_id = repository.list_rounds()[0].id

    board = reporting.round_leaderboard(evaluations, teams, first_round_id)
    assert board[0] == {'team_id': board[0]['team_id'], 'name': 'Rebels', 'score': 58}
    assert board[1]['name'] == 'Tech Vengers'
    assert board[1]['score'] == 55
