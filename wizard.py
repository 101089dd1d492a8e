"""
Judging wizard: evaluator -> team -> round -> score.

Steps advance one at a time and ``back()`` steps one at a time. A blocked
transition raises WizardError and leaves the wizard exactly as it was.
"""

import logging
from numbers import Number

from client import ApiError
from score_map import total_of

logger = logging.getLogger(__name__)

STEPS = ('evaluator', 'team', 'round', 'score')


class WizardError(Exception):
    pass


class JudgingWizard:
    def __init__(self, session, client):
        if not session.is_authenticated:
            raise WizardError('Log in before judging')
        self.session = session
        self.client = client

        self.teams = []
        self.rounds = []
        self.evaluators = []
        self.evaluations = []
        self.problem_statements = []
        self.parameters = []

        self.step = 'evaluator'
        # Judges always score as their own evaluator
        self.selected_evaluator = session.evaluator_id if session.is_judge else None
        self.selected_team = None
        self.selected_round = None
        self.scores = {}
        self.feedback = ''
        self.existing = None
        self.delete_pending = False

    # --- data ---

    def refresh(self):
        """Refetch everything the wizard shows."""
        self.teams = self.client.teams()
        self.rounds = self.client.rounds()
        self.evaluators = self.client.evaluators()
        self.problem_statements = self.client.problem_statements()
        self.evaluations = self.client.evaluations()

    def _require_step(self, step):
        if self.step != step:
            raise WizardError(f'Not allowed at the "{self.step}" step')

    def _team(self, team_id):
        for team in self.teams:
            if team['id'] == team_id:
                return team
        return None

    # --- evaluator ---

    def can_select_evaluator(self, evaluator_id):
        if self.session.is_admin:
            return True
        return self.session.is_judge and evaluator_id == self.session.evaluator_id

    def select_evaluator(self, evaluator_id):
        self._require_step('evaluator')
        if not self.can_select_evaluator(evaluator_id):
            raise WizardError('Judges can only submit scores as themselves')
        if evaluator_id not in {e['id'] for e in self.evaluators}:
            raise WizardError(f'Unknown evaluator {evaluator_id}')
        self.selected_evaluator = evaluator_id
        self.step = 'team'

    # --- team ---

    def active_round(self):
        return next((r for r in self.rounds if r['is_active']), None)

    def candidate_teams(self, search=''):
        """Teams that can be scored, by name. Teams without a problem statement are left out."""
        search = search.lower()
        teams = [t for t in self.teams
                 if t.get('problem_statement_id') and search in t['name'].lower()]
        return sorted(teams, key=lambda t: t['name'].lower())

    def unassigned_teams(self):
        return [t for t in self.teams if not t.get('problem_statement_id')]

    def _scored_team_ids(self):
        current = self.active_round()
        if current is None:
            return set()
        return {e['team_id'] for e in self.evaluations
                if e['round_id'] == current['id'] and e['evaluator_id'] == self.selected_evaluator}

    def pending_teams(self, search=''):
        scored = self._scored_team_ids()
        return [t for t in self.candidate_teams(search) if t['id'] not in scored]

    def evaluated_teams(self, search=''):
        scored = self._scored_team_ids()
        return [t for t in self.candidate_teams(search) if t['id'] in scored]

    def select_team(self, team_id):
        self._require_step('team')
        team = self._team(team_id)
        if team is None:
            raise WizardError(f'Unknown team {team_id}')
        if not team.get('problem_statement_id'):
            raise WizardError('Team must have a problem statement assigned first.')
        self.selected_team = team_id
        self.step = 'round'

    # --- round ---

    def candidate_rounds(self):
        return [r for r in self.rounds if r['is_active']]

    def select_round(self, round_id):
        self._require_step('round')
        if round_id not in {r['id'] for r in self.candidate_rounds()}:
            raise WizardError('Only the active round can be scored')

        parameters = self.client.parameters(round_id)
        existing = self.client.find_evaluation(self.selected_team, round_id, self.selected_evaluator)

        self.parameters = parameters
        self.selected_round = round_id
        self.existing = existing
        if existing is not None:
            self.scores = dict(existing['scores'])
            self.feedback = existing.get('feedback') or ''
        else:
            self.scores = {}
            self.feedback = ''
        self.step = 'score'

    # --- score ---

    def _parameter(self, parameter_id):
        for parameter in self.parameters:
            if parameter['id'] == parameter_id:
                return parameter
        return None

    def set_score(self, parameter_id, value):
        self._require_step('score')
        parameter = self._parameter(parameter_id)
        if parameter is None:
            raise WizardError(f'Parameter {parameter_id} is not part of this round')
        if isinstance(value, bool) or not isinstance(value, Number):
            raise WizardError('Scores must be numbers')
        if not 0 <= value <= parameter['max_score']:
            raise WizardError(f'Score for "{parameter["name"]}" must be between 0 and {parameter["max_score"]}')
        self.scores[parameter_id] = value

    def set_feedback(self, text):
        self._require_step('score')
        self.feedback = text

    @property
    def total(self):
        return total_of(self.scores)

    @property
    def max_total(self):
        return sum(p['max_score'] for p in self.parameters)

    @property
    def is_update(self):
        return self.existing is not None

    def submit(self):
        """Save the scores and go back to team selection. Returns the evaluation id."""
        self._require_step('score')
        team = self._team(self.selected_team)
        if team is None or not team.get('problem_statement_id'):
            raise WizardError('Team must have a problem statement assigned first.')

        try:
            evaluation_id, created = self.client.save_evaluation(
                team_id=self.selected_team,
                round_id=self.selected_round,
                evaluator_id=self.selected_evaluator,
                problem_statement_id=team['problem_statement_id'],
                scores=self.scores,
                feedback=self.feedback,
                total_score=self.total,
            )
        except ApiError:
            logger.exception('Submitting evaluation failed')
            raise

        logger.info('Evaluation %s %s', evaluation_id, 'created' if created else 'updated')
        self._reset_to_team()
        self.evaluations = self.client.evaluations()
        return evaluation_id

    def request_delete(self):
        self._require_step('score')
        if self.existing is None:
            raise WizardError('There is no saved evaluation to delete')
        self.delete_pending = True

    def cancel_delete(self):
        self.delete_pending = False

    def confirm_delete(self):
        if not self.delete_pending or self.existing is None:
            raise WizardError('Deletion was not requested')
        try:
            self.client.delete_evaluation(self.existing['id'])
        except ApiError:
            logger.exception('Deleting evaluation %s failed', self.existing['id'])
            raise
        self._reset_to_team()
        self.evaluations = self.client.evaluations()

    # --- navigation ---

    def back(self):
        index = STEPS.index(self.step)
        if index == 0:
            raise WizardError('Already at the first step')
        if self.step == 'score':
            self.selected_round = None
            self.parameters = []
            self.scores = {}
            self.feedback = ''
            self.existing = None
            self.delete_pending = False
        elif self.step == 'round':
            self.selected_team = None
        self.step = STEPS[index - 1]

    def _reset_to_team(self):
        self.step = 'team'
        self.selected_team = None
        self.selected_round = None
        self.parameters = []
        self.scores = {}
        self.feedback = ''
        self.existing = None
        self.delete_pending = False

    def reset(self):
        self._reset_to_team()
        self.step = 'evaluator'
        if not self.session.is_judge:
            self.selected_evaluator = None
