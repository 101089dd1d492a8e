# seed_data.py
# Reference data for the portal: evaluators, teams, problem statements, rounds,
# rubric parameters, login accounts and the evaluations already recorded.
# Run with `flask seed` or `python seed_data.py`.

from flask import current_app
from extensions import db
from models import Evaluator, User, Team, ProblemStatement, Round, Parameter, Evaluation
from score_map import encode_scores

EVALUATORS = ['Rishabh', 'Srijan', 'Ramana']

TEAMS = [
    'Codestorm', 'MARS', 'Codecription', 'Rebels', 'Winners',
    'Team Triverse', 'CodeRed', 'BitByBit', 'Code101', '4chan',
    'Tech Vengers', 'D3CODE', 'Hackoholics', 'Code Catalyst', 'Phoenix',
    'CodeQuad', 'TokenX', 'Alpha developer', 'Team Invictus', 'DeCoders',
    'Code Fusion', '4 CLOVER', 'Avengers', 'TEAM SHOURYANGA', 'TriNova Coders',
    'Team Titans', 'Central C', 'Code Wave', 'Binary Architects', 'Mind Spark',
]

PROBLEM_STATEMENTS = [
    ('PartySync', 'Productivity & Time-Saving Tools'),
    ('AcademiFlow', 'Productivity & Time-Saving Tools'),
    ('FlowSync', 'Smart Infrastructure & Urban Development'),
    ('AquaGuard', 'Smart Infrastructure & Urban Development'),
    ('Sound-Wave', 'Financial Inclusion'),
    ('FinTok Truth Detector', 'Financial Inclusion'),
    ('AlumniGraph', 'Future of Works and Careers'),
    ('The Skill Translator', 'Future of Works and Careers'),
    ('DrishtiNav', 'Health & Well-Being Technology'),
    ('Geo-Infect', 'Health & Well-Being Technology'),
    ('Svayam-Adhyayi', 'Learning & Skill Development'),
    ('GuardianLink', 'Learning & Skill Development'),
    ('DhartiSeva', 'Rural & Grassroots Innovation'),
    ('The Pocket Agronomist', 'Rural & Grassroots Innovation'),
    ('CarbonSync', 'Sustainable & Green Solutions'),
    ('Poseidon’s Pulse', 'Sustainable & Green Solutions'),
    ('PumpWatch', 'Safety, Trust & Responsible Technology'),
    ('Deepfake Defender', 'Safety, Trust & Responsible Technology'),
]

# (name, sequence, [(parameter, max_score), ...])
ROUNDS = [
    ('Round 1: Ideation', 1, [
        ('Problem Understanding & Requirement Clarity', 10),
        ('Feasibility & Scope', 5),
        ('Implementation Roadmap', 10),
        ('Technical Approach', 5),
    ]),
    ('Round 2: Implementation', 2, [
        ('Core Functionalities Implemented', 10),
        ('Scalability & System Design', 5),
        ('UI/UX & Usability', 10),
        ('USP / Innovation', 5),
    ]),
    ('Round 3: Final Pitch', 3, [
        ('Problem–Solution Fit', 10),
        ('Demonstration Quality', 10),
        ('Team Collaboration', 5),
        ('Overall Impact & Viability', 15),
    ]),
]

ASSIGNMENTS = {
    'GuardianLink': ['Codestorm', '4chan', 'Hackoholics', 'Code Catalyst', 'TriNova Coders', 'Central C', 'Code Wave'],
    'AcademiFlow': ['Winners', 'CodeQuad', 'Team Invictus', 'DeCoders', '4 CLOVER', 'Team Titans'],
    'Sound-Wave': ['Team Triverse', 'D3CODE', 'Mind Spark'],
    'FinTok Truth Detector': ['TEAM SHOURYANGA', 'Binary Architects'],
    'The Pocket Agronomist': ['Phoenix', 'Code Fusion'],
    'PumpWatch': ['Codecription', 'CodeRed'],
    'AlumniGraph': ['Tech Vengers'],
    'CarbonSync': ['BitByBit'],
    'Deepfake Defender': ['Code101'],
    'FlowSync': ['Avengers'],
    'Geo-Infect': ['Rebels'],
    'PartySync': ['TokenX'],
    'Svayam-Adhyayi': ['Alpha developer'],
    'The Skill Translator': ['MARS'],
}

# Scores in rubric order; totals are derived from them
HISTORY = [
    ('Rishabh', 1, 'Initial round evaluation', {
        'Codestorm': [8, 4, 8, 4], 'MARS': [6, 3, 4, 1], 'Codecription': [2, 1, 1, 1],
        'Rebels': [9, 5, 9, 5], 'Winners': [10, 3, 6, 4], 'Team Triverse': [10, 4, 9, 4],
        'CodeRed': [9, 4, 8, 4], 'BitByBit': [6, 4, 4, 2], 'Code101': [7, 2, 2, 2],
        '4chan': [7, 3, 6, 2], 'Tech Vengers': [9, 5, 9, 4], 'D3CODE': [9, 4, 9, 5],
        'Hackoholics': [5, 2, 4, 0], 'Code Catalyst': [5, 4, 3, 1], 'Phoenix': [3, 2, 2, 1],
        'CodeQuad': [4, 2, 3, 2], 'TokenX': [8, 4, 5, 3], 'Alpha developer': [3, 0, 0, 0],
        'Team Invictus': [4, 2, 4, 3], 'DeCoders': [3, 1, 2, 1], 'Code Fusion': [7, 2, 3, 2],
        '4 CLOVER': [5, 2, 3, 1], 'Avengers': [5, 2, 3, 2], 'TEAM SHOURYANGA': [2, 1, 1, 0],
        'TriNova Coders': [5, 2, 3, 1], 'Team Titans': [6, 4, 5, 2], 'Central C': [9, 4, 6, 3],
        'Code Wave': [8, 4, 5, 2], 'Binary Architects': [4, 2, 1, 0], 'Mind Spark': [4, 0, 1, 1],
    }),
    ('Srijan', 1, 'Initial round evaluation', {
        'Codestorm': [9, 5, 8, 4], 'MARS': [7, 3, 5, 2], 'Codecription': [4, 0, 1, 2],
        'Rebels': [10, 5, 10, 5], 'Winners': [10, 3, 6, 4], 'Team Triverse': [10, 3, 7, 5],
        'CodeRed': [9, 4, 9, 5], 'BitByBit': [7, 4, 5, 0], 'Code101': [8, 2, 3, 3],
        '4chan': [8, 3, 7, 2], 'Tech Vengers': [10, 5, 8, 5], 'D3CODE': [10, 3, 7, 4],
        'Hackoholics': [6, 2, 5, 0], 'Code Catalyst': [6, 3, 4, 2], 'Phoenix': [4, 2, 0, 0],
        'CodeQuad': [5, 2, 3, 1], 'TokenX': [9, 5, 6, 2], 'Alpha developer': [4, 0, 0, 0],
        'Team Invictus': [5, 2, 6, 2], 'DeCoders': [5, 0, 3, 0], 'Code Fusion': [8, 3, 4, 2],
        '4 CLOVER': [6, 2, 4, 0], 'Avengers': [7, 2, 5, 3], 'TEAM SHOURYANGA': [4, 2, 0, 2],
        'TriNova Coders': [7, 3, 5, 1], 'Team Titans': [7, 4, 5, 3], 'Central C': [8, 5, 8, 4],
        'Code Wave': [8, 4, 6, 3], 'Binary Architects': [6, 3, 0, 0], 'Mind Spark': [5, 0, 0, 1],
    }),
    ('Rishabh', 2, 'Round 2 evaluation', {
        'Team Invictus': [10, 4, 9, 1], 'Tech Vengers': [8, 4, 7, 5], 'Team Triverse': [6, 3, 7, 2],
        'Mind Spark': [7, 2, 7, 2], 'Team Titans': [8, 2, 7, 1], 'Code101': [7, 2, 6, 2],
        'D3CODE': [7, 3, 2, 2], 'Central C': [7, 1, 4, 2], 'CodeQuad': [6, 1, 4, 1],
        'Code Catalyst': [4, 1, 4, 1], 'TriNova Coders': [5, 1, 2, 2], 'Alpha developer': [3, 1, 4, 1],
        '4chan': [2, 1, 2, 1], 'Code Wave': [1, 1, 1, 1],
    }),
    ('Srijan', 2, 'Round 2 evaluation', {
        'Central C': [10, 4, 8, 5], 'Tech Vengers': [10, 5, 6, 5], 'Team Invictus': [10, 4, 8, 3],
        'Team Titans': [8, 2, 10, 3], 'Code101': [7, 3, 7, 3], 'Team Triverse': [7, 3, 6, 1],
        'Mind Spark': [5, 2, 7, 2], 'TriNova Coders': [6, 2, 6, 1], 'CodeQuad': [6, 2, 5, 1],
        'D3CODE': [6, 3, 2, 2], 'Code Catalyst': [4, 1, 3, 1], '4chan': [3, 1, 4, 1],
        'Alpha developer': [1, 1, 1, 1], 'Code Wave': [1, 1, 1, 1],
    }),
]


def seed_history():
    """Add the recorded evaluations that are not in the database yet.

    Safe to run repeatedly: an existing (team, round, evaluator) row is left alone.
    """
    evaluators = {e.name: e for e in Evaluator.query.all()}
    teams = {t.name: t for t in Team.query.all()}
    rounds = {r.sequence: r for r in Round.query.all()}

    added = 0
    for evaluator_name, sequence, feedback, rows in HISTORY:
        evaluator = evaluators.get(evaluator_name)
        seeded_round = rounds.get(sequence)
        if evaluator is None or seeded_round is None:
            current_app.logger.warning('Skipping history for %s, round %s: not found', evaluator_name, sequence)
            continue
        parameter_ids = [p.id for p in seeded_round.parameters]

        for team_name, values in rows.items():
            team = teams.get(team_name)
            if team is None:
                continue
            exists = Evaluation.query.filter_by(
                team_id=team.id, round_id=seeded_round.id, evaluator_id=evaluator.id
            ).first()
            if exists:
                continue
            scores = dict(zip(parameter_ids, values))
            db.session.add(Evaluation(
                team_id=team.id,
                round_id=seeded_round.id,
                evaluator_id=evaluator.id,
                problem_statement_id=team.problem_statement_id,
                scores=encode_scores(scores),
                feedback=feedback,
                total_score=sum(scores.values()),
            ))
            added += 1

    db.session.commit()
    if added:
        current_app.logger.info('Added %s historical evaluations', added)
    return added


def seed_database(include_history=True):
    """Populate an empty database. Returns False if teams already exist."""
    if Team.query.count() > 0:
        return False

    try:
        evaluators = [Evaluator(name=name) for name in EVALUATORS]
        db.session.add_all(evaluators)
        db.session.add_all([Team(name=name) for name in TEAMS])
        statements = {title: ProblemStatement(title=title, theme=theme) for title, theme in PROBLEM_STATEMENTS}
        db.session.add_all(statements.values())
        db.session.commit()

        for name, sequence, rubric in ROUNDS:
            new_round = Round(name=name, sequence=sequence, is_active=False)
            new_round.parameters = [Parameter(name=p_name, max_score=max_score) for p_name, max_score in rubric]
            db.session.add(new_round)

        # Judges log in as their evaluator: lowercase name + "123"
        db.session.add(User(username='admin', password='admin123', role='admin'))
        for evaluator in evaluators:
            db.session.add(User(username=evaluator.name, password=f'{evaluator.name.lower()}123',
                                role='judge', evaluator_id=evaluator.id))

        teams = {t.name: t for t in Team.query.all()}
        for title, team_names in ASSIGNMENTS.items():
            for team_name in team_names:
                teams[team_name].problem_statement_id = statements[title].id
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Seeding failed')
        raise

    current_app.logger.info('Seeded %s teams, %s problem statements, %s rounds',
                            len(TEAMS), len(PROBLEM_STATEMENTS), len(ROUNDS))
    if include_history:
        seed_history()
    return True


if __name__ == '__main__':
    from app import create_app

    app = create_app()
    with app.app_context():
        if seed_database():
            print('Seed data added.')
        else:
            print('Database already contains teams, nothing to do.')
