import pytest

from client import ApiError, PortalSession
from wizard import JudgingWizard, WizardError


def _named(rows, name):
    return next(row for row in rows if row['name'] == name)


@pytest.fixture
def admin(portal):
    session = PortalSession()
    session.login(portal, 'admin', 'admin123')
    return session


@pytest.fixture
def judge(portal):
    session = PortalSession()
    session.login(portal, 'Rishabh', 'rishabh123')
    return session


@pytest.fixture
def round_one(portal):
    first = next(r for r in portal.rounds() if r['sequence'] == 1)
    portal.set_round_active(first['id'], True)
    return first


def _wizard(session, portal):
    wizard = JudgingWizard(session, portal)
    wizard.refresh()
    return wizard


def _walk_to_score(wizard, team_name, round_id):
    if wizard.step == 'evaluator':
        wizard.select_evaluator(wizard.selected_evaluator)
    wizard.select_team(_named(wizard.teams, team_name)['id'])
    wizard.select_round(round_id)


def test_failed_login_leaves_session_empty(portal):
    session = PortalSession()
    with pytest.raises(ApiError) as excinfo:
        session.login(portal, 'admin', 'wrong')
    assert excinfo.value.status_code == 401
    assert not session.is_authenticated


def test_logout_resets_session(portal, judge):
    assert judge.is_judge
    judge.logout()
    assert judge.user is None
    assert judge.evaluator_id is None
    with pytest.raises(WizardError):
        JudgingWizard(judge, portal)


def test_judge_starts_with_own_evaluator(portal, judge):
    wizard = _wizard(judge, portal)
    assert wizard.step == 'evaluator'
    assert wizard.selected_evaluator == judge.evaluator_id


def test_judge_cannot_select_another_evaluator(portal, judge):
    wizard = _wizard(judge, portal)
    other = _named(wizard.evaluators, 'Srijan')['id']

    assert wizard.can_select_evaluator(other) is False
    with pytest.raises(WizardError):
        wizard.select_evaluator(other)
    assert wizard.step == 'evaluator'
    assert wizard.selected_evaluator == judge.evaluator_id


def test_admin_can_select_any_evaluator(portal, admin):
    wizard = _wizard(admin, portal)
    other = _named(wizard.evaluators, 'Ramana')['id']
    wizard.select_evaluator(other)
    assert wizard.step == 'team'
    assert wizard.selected_evaluator == other


def test_teams_without_problem_statement_are_unassigned(portal, judge):
    portal.create_team('Night Owls')
    wizard = _wizard(judge, portal)
    wizard.select_evaluator(judge.evaluator_id)

    assert 'Night Owls' not in [t['name'] for t in wizard.candidate_teams()]
    assert [t['name'] for t in wizard.unassigned_teams()] == ['Night Owls']
    with pytest.raises(WizardError, match='problem statement'):
        wizard.select_team(_named(wizard.teams, 'Night Owls')['id'])
    assert wizard.step == 'team'
    assert wizard.selected_team is None


def test_candidate_teams_are_sorted_and_searchable(portal, judge):
    wizard = _wizard(judge, portal)
    names = [t['name'] for t in wizard.candidate_teams()]
    assert names == sorted(names, key=str.lower)
    assert [t['name'] for t in wizard.candidate_teams('code')][:2] == ['Code Catalyst', 'Code Fusion']


def test_only_active_round_is_offered(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    assert [r['id'] for r in wizard.candidate_rounds()] == [round_one['id']]

    wizard.select_evaluator(judge.evaluator_id)
    wizard.select_team(_named(wizard.teams, 'Codestorm')['id'])
    inactive = next(r for r in wizard.rounds if not r['is_active'])
    with pytest.raises(WizardError):
        wizard.select_round(inactive['id'])
    assert wizard.step == 'round'


def test_new_evaluation_starts_empty(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])

    assert wizard.step == 'score'
    assert wizard.is_update is False
    assert wizard.scores == {}
    assert wizard.total == 0
    assert wizard.max_total == 30


def test_submit_codestorm_full_marks(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    for parameter in wizard.parameters:
        wizard.set_score(parameter['id'], parameter['max_score'])
    wizard.set_feedback('Excellent')
    assert wizard.total == 30

    evaluation_id = wizard.submit()

    assert wizard.step == 'team'
    assert wizard.selected_team is None
    assert wizard.selected_round is None
    assert wizard.scores == {}
    row = next(e for e in wizard.evaluations if e['id'] == evaluation_id)
    assert row['team_name'] == 'Codestorm'
    assert row['round_name'] == round_one['name']
    assert row['total_score'] == 30
    assert [t['name'] for t in wizard.evaluated_teams()] == ['Codestorm']
    assert 'Codestorm' not in [t['name'] for t in wizard.pending_teams()]


def test_resubmitting_updates_the_same_row(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    first_param = wizard.parameters[0]['id']
    wizard.set_score(first_param, 4)
    first_id = wizard.submit()

    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    assert wizard.is_update
    assert wizard.scores == {first_param: 4}
    wizard.set_score(first_param, 9)
    assert wizard.submit() == first_id

    rows = [e for e in portal.evaluations() if e['team_name'] == 'Codestorm']
    assert len(rows) == 1
    assert rows[0]['total_score'] == 9


def test_scores_are_bounded(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    parameter = wizard.parameters[1]

    wizard.set_score(parameter['id'], 3)
    for value in (-1, parameter['max_score'] + 1, 'high'):
        with pytest.raises(WizardError):
            wizard.set_score(parameter['id'], value)
    assert wizard.scores == {parameter['id']: 3}

    with pytest.raises(WizardError):
        wizard.set_score(9999, 1)


def test_submitted_total_matches_scores(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Rebels', round_one['id'])
    values = [7, 2.5, 9, 0]
    for parameter, value in zip(wizard.parameters, values):
        wizard.set_score(parameter['id'], value)
    evaluation_id = wizard.submit()

    row = next(e for e in portal.evaluations() if e['id'] == evaluation_id)
    assert row['total_score'] == sum(values)
    assert sum(row['scores'].values()) == row['total_score']


def test_delete_needs_confirmation(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    with pytest.raises(WizardError):
        wizard.request_delete()

    wizard.set_score(wizard.parameters[0]['id'], 5)
    wizard.submit()
    _walk_to_score(wizard, 'Codestorm', round_one['id'])

    with pytest.raises(WizardError):
        wizard.confirm_delete()
    wizard.request_delete()
    wizard.cancel_delete()
    assert len(portal.evaluations()) == 1

    wizard.request_delete()
    wizard.confirm_delete()
    assert wizard.step == 'team'
    assert wizard.existing is None
    assert wizard.evaluations == []
    assert portal.evaluations() == []


def test_back_moves_one_step_and_clears_later_choices(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    wizard.set_score(wizard.parameters[0]['id'], 5)

    wizard.back()
    assert wizard.step == 'round'
    assert wizard.scores == {}
    assert wizard.selected_round is None
    wizard.back()
    assert wizard.step == 'team'
    assert wizard.selected_team is None
    wizard.back()
    assert wizard.step == 'evaluator'
    with pytest.raises(WizardError):
        wizard.back()


def test_steps_cannot_be_skipped(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    with pytest.raises(WizardError):
        wizard.select_team(_named(wizard.teams, 'Codestorm')['id'])
    with pytest.raises(WizardError):
        wizard.select_round(round_one['id'])
    with pytest.raises(WizardError):
        wizard.submit()


def test_reset_returns_to_first_step(portal, admin, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    wizard.set_score(wizard.parameters[0]['id'], 5)

    wizard.reset()
    assert wizard.step == 'evaluator'
    assert wizard.selected_team is None
    assert wizard.scores == {}
    assert wizard.selected_evaluator == judge.evaluator_id

    wizard = _wizard(admin, portal)
    wizard.select_evaluator(_named(wizard.evaluators, 'Ramana')['id'])
    wizard.reset()
    assert wizard.selected_evaluator is None


def test_rounds_created_through_client_start_inactive(portal, admin):
    round_id = portal.create_round('Round 4: Demo Day', 4)
    wizard = _wizard(admin, portal)
    created = next(r for r in wizard.rounds if r['id'] == round_id)
    assert created['is_active'] is False
    assert round_id not in [r['id'] for r in wizard.candidate_rounds()]


def test_client_updates_evaluation_in_place(portal, judge, round_one):
    wizard = _wizard(judge, portal)
    _walk_to_score(wizard, 'Codestorm', round_one['id'])
    first_param = wizard.parameters[0]['id']
    wizard.set_score(first_param, 4)
    evaluation_id = wizard.submit()

    portal.update_evaluation(evaluation_id, {first_param: 6}, 'Rescored', 6)
    row = next(e for e in portal.evaluations() if e['id'] == evaluation_id)
    assert row['scores'] == {first_param: 6}
    assert row['feedback'] == 'Rescored'

    with pytest.raises(ApiError) as excinfo:
        portal.update_evaluation(evaluation_id, {first_param: 60}, None, 60)
    assert excinfo.value.status_code == 400
