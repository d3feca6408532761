"""
Test configuration and shared fixtures for Colivin tests.

This file contains:
- Centralized test configuration
- Shared fixtures used across multiple test files
- Common test utilities (user factory, logged-in clients, house setup)
"""

import pytest
from colivin import create_app
from colivin.models import db, User
from colivin.utils.auth_utils import hash_password
from colivin.utils.house_utils import create_house, join_house_by_invite_code


TEST_PASSWORD = 'TestPass123!'

# Centralized test configuration
TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key',
    'JWT_SECRET_KEY': 'test-jwt-secret-key',
    'JWT_ACCESS_TOKEN_EXPIRES': 3600,
    'BCRYPT_LOG_ROUNDS': 4,
    'MAIL_SERVER': 'localhost',
    'MAIL_PORT': 587,
    'MAIL_USE_TLS': False,
    'MAIL_USE_SSL': False,
    'MAIL_DEFAULT_SENDER': 'test@example.com',
    'POINTS_TASK_COMPLETED': 10,
    'POINTS_EXPENSE_PAID': 5,
    'POINTS_SHARED_EXPENSE_PAID': 5
}


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    app = create_app(TEST_CONFIG)
    return app


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Create an application context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def db_session(app_context):
    """Create a database session and clean up after tests."""
    db.create_all()
    yield db.session
    db.session.remove()
    db.drop_all()


@pytest.fixture
def make_user(db_session):
    """Factory creating users that can log in with TEST_PASSWORD."""
    def _make_user(username, tag, email=None):
        user = User(
            email=email or f'{username.lower()}@example.com',
            username=username,
            tag=tag,
            password_hash=hash_password(TEST_PASSWORD)
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user('alice', 'A1B2')


@pytest.fixture
def bob(make_user):
    return make_user('bob', 'B0B0')


@pytest.fixture
def carol(make_user):
    return make_user('carol', 'CA01')


@pytest.fixture
def login_client(app):
    """Factory returning a test client logged in as the given user."""
    def _login(user):
        test_client = app.test_client()
        resp = test_client.post('/auth/login', json={'identifier': user.email, 'password': TEST_PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return test_client
    return _login


@pytest.fixture
def house(alice, bob):
    """House created by alice with bob as second member."""
    house = create_house('Casa Azul', alice)
    join_house_by_invite_code(house.invite_code, bob)
    return house


@pytest.fixture
def house_url(house):
    """Base URL of the house fixture."""
    return f'/api/houses/{house.id}'

