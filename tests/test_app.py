"""
Colivin - Application Tests

App factory, operational endpoints and the JSON error handlers.
"""

import pytest
from colivin import create_app
from colivin.utils.error_handlers import ActionError, render_error


class TestAppFactory:

    def test_test_config_is_applied(self, app):
        assert app.config['TESTING'] is True
        assert app.config['BCRYPT_LOG_ROUNDS'] == 4

    def test_env_config(self, monkeypatch):
        monkeypatch.setenv('FLASK_ENV', 'testing')
        monkeypatch.setenv('POINTS_TASK_COMPLETED', '25')
        monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
        app = create_app()
        assert app.config['POINTS_TASK_COMPLETED'] == 25
        assert app.config['POINTS_EXPENSE_PAID'] == 5
        assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite:///:memory:'

    def test_blueprints_registered(self, app):
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        for path in ['/auth/login', '/api/houses', '/api/houses/join', '/api/houses/<int:house_id>/messages',
                     '/api/houses/<int:house_id>/tasks', '/api/houses/<int:house_id>/expenses',
                     '/api/houses/<int:house_id>/shared-expenses', '/api/houses/<int:house_id>/rules',
                     '/api/houses/<int:house_id>/events', '/api/houses/<int:house_id>/leaderboard']:
            assert path in rules


class TestOperationalEndpoints:

    def test_home(self, client):
        assert client.get('/').get_json()['service'] == 'colivin'

    def test_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'healthy'

    def test_status(self, client):
        data = client.get('/api/status').get_json()
        assert data['status'] == 'operational'
        assert 'version' in data


class TestErrorHandlers:

    def test_unknown_route_is_json(self, client):
        resp = client.get('/does-not-exist')
        assert resp.status_code == 404
        assert 'error' in resp.get_json()

    def test_method_not_allowed_is_json(self, client):
        resp = client.delete('/health')
        assert resp.status_code == 405
        assert 'error' in resp.get_json()

    def test_action_error_helpers(self):
        assert ActionError.forbidden('no').status_code == 403
        assert ActionError.not_found('no').status_code == 404
        assert ActionError.conflict('no').status_code == 409
        assert ActionError('no').status_code == 400
        assert isinstance(ActionError('no'), ValueError)

    def test_render_error(self, app):
        with app.test_request_context():
            body, status = render_error('Nope', 418)
        assert status == 418
        assert body.get_json() == {'error': 'Nope'}

    def test_action_error_rolls_back(self, db_session, login_client, house_url, alice):
        resp = login_client(alice).post(f'{house_url}/tasks', json={'title': 'ok', 'deadline_days': 'soon'})
        assert resp.status_code == 400
        assert resp.get_json() == {'error': 'Please enter a valid number of days (a number greater than 0).'}

    @pytest.mark.parametrize('payload', [[1, 2], 'text'])
    def test_non_object_json_rejected(self, db_session, login_client, payload, alice):
        resp = login_client(alice).post('/api/houses', json=payload)
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Request data must be a JSON object.'
