import pytest

from app import create_app
from client import PortalClient
from config import TestConfig
from extensions import db
from seed_data import seed_database


class FlaskHttp:
    """Gives the Flask test client the request() call PortalClient expects."""

    def __init__(self, test_client):
        self.test_client = test_client

    def request(self, method, url, params=None, json=None):
        return FlaskResponse(self.test_client.open(url, method=method, query_string=params, json=json))


class FlaskResponse:
    def __init__(self, response):
        self.status_code = response.status_code
        self._response = response

    def json(self):
        data = self._response.get_json(silent=True)
        if data is None:
            raise ValueError('Response is not JSON')
        return data


def _build_app(tmp_path, include_history):
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f'sqlite:///{tmp_path / "portal.db"}'

    app = create_app(FileConfig)
    with app.app_context():
        seed_database(include_history=include_history)
    return app


@pytest.fixture
def app(tmp_path):
    app = _build_app(tmp_path, include_history=False)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def seeded_app(tmp_path):
    app = _build_app(tmp_path, include_history=True)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def http(app):
    return app.test_client()


@pytest.fixture
def portal(http):
    return PortalClient(http=FlaskHttp(http))
