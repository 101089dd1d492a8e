"""
HTTP client for the portal API and the session object that holds identity.

PortalClient speaks JSON over a requests.Session. Any object exposing the
same ``request(method, url, params=..., json=...)`` call and returning
responses with ``status_code`` and ``json()`` can be passed instead.
"""

import logging

import requests

from score_map import normalize_scores

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response or transport failure."""

    def __init__(self, status_code, message):
        super().__init__(f'{status_code}: {message}')
        self.status_code = status_code
        self.message = message


def _decode_evaluation(row):
    row = dict(row)
    row['scores'] = normalize_scores(row.get('scores') or {})
    return row


class PortalClient:
    def __init__(self, base_url='', http=None):
        self.base_url = base_url.rstrip('/')
        self.http = http or requests.Session()

    def _call(self, method, path, params=None, payload=None):
        url = f'{self.base_url}/api{path}'
        try:
            response = self.http.request(method, url, params=params, json=payload)
        except requests.RequestException as e:
            logger.error('%s %s failed: %s', method, url, e)
            raise ApiError(0, str(e))

        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = body.get('message') if isinstance(body, dict) else None
            level = logging.ERROR if response.status_code >= 500 else logging.WARNING
            logger.log(level, '%s %s returned %s: %s', method, url, response.status_code, message)
            raise ApiError(response.status_code, message or 'Request failed')
        return body

    def login(self, username, password):
        return self._call('POST', '/login', payload={'username': username, 'password': password})['user']

    def evaluators(self):
        return self._call('GET', '/evaluators')

    def teams(self):
        return self._call('GET', '/teams')

    def problem_statements(self):
        return self._call('GET', '/problem-statements')

    def rounds(self):
        return self._call('GET', '/rounds')

    def parameters(self, round_id=None):
        params = {'round_id': round_id} if round_id is not None else None
        return self._call('GET', '/parameters', params=params)

    def evaluations(self):
        return [_decode_evaluation(row) for row in self._call('GET', '/evaluations')]

    def find_evaluation(self, team_id, round_id, evaluator_id):
        try:
            row = self._call('GET', '/evaluations/lookup', params={
                'team_id': team_id, 'round_id': round_id, 'evaluator_id': evaluator_id,
            })
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return _decode_evaluation(row)

    def create_team(self, name, description=None):
        return self._call('POST', '/teams', payload={'name': name, 'description': description})['id']

    def assign_problem_statement(self, team_id, problem_statement_id):
        self._call('POST', f'/teams/{team_id}/assign-ps',
                   payload={'problem_statement_id': problem_statement_id})

    def create_round(self, name, sequence):
        return self._call('POST', '/rounds', payload={'name': name, 'sequence': sequence})['id']

    def set_round_active(self, round_id, is_active):
        self._call('POST', f'/rounds/{round_id}/toggle-active', payload={'is_active': bool(is_active)})

    def save_evaluation(self, team_id, round_id, evaluator_id, problem_statement_id,
                        scores, feedback, total_score):
        """Create or overwrite the evaluation for the triple. Returns (id, created)."""
        body = self._call('POST', '/evaluations', payload={
            'team_id': team_id,
            'round_id': round_id,
            'evaluator_id': evaluator_id,
            'problem_statement_id': problem_statement_id,
            'scores': {str(k): v for k, v in scores.items()},
            'feedback': feedback,
            'total_score': total_score,
        })
        return body['id'], body.get('created', True)

    def update_evaluation(self, evaluation_id, scores, feedback, total_score):
        self._call('PUT', f'/evaluations/{evaluation_id}', payload={
            'scores': {str(k): v for k, v in scores.items()},
            'feedback': feedback,
            'total_score': total_score,
        })

    def delete_evaluation(self, evaluation_id):
        self._call('DELETE', f'/evaluations/{evaluation_id}')


class PortalSession:
    """The logged-in user, passed explicitly to whatever needs identity."""

    def __init__(self):
        self.user = None

    @property
    def is_authenticated(self):
        return self.user is not None

    @property
    def is_admin(self):
        return self.is_authenticated and self.user['role'] == 'admin'

    @property
    def is_judge(self):
        return self.is_authenticated and self.user['role'] == 'judge'

    @property
    def evaluator_id(self):
        return self.user.get('evaluator_id') if self.user else None

    def login(self, client, username, password):
        # ApiError(401) propagates and leaves the session empty
        self.user = client.login(username, password)
        logger.info('Logged in as %s (%s)', self.user['username'], self.user['role'])
        return self.user

    def logout(self):
        self.user = None
