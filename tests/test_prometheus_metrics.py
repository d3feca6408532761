from prometheus_client import REGISTRY
from colivin.utils.house_utils import create_house, leave_house


def test_metrics_endpoint_exposes_prometheus(app):
    with app.test_client() as client:
        client.get('/health')
        resp = client.get('/api/metrics')
        assert resp.status_code == 200
        body = resp.data.decode('utf-8')
        # Basic presence of our metric names
        assert 'colivin_http_requests_total' in body
        assert 'colivin_http_request_latency_seconds' in body
        # Check content type
        assert resp.mimetype.startswith('text/plain')


def test_actions_and_points_are_counted(db_session, login_client, house_url, alice):
    client = login_client(alice)
    task_id = client.post(f'{house_url}/tasks', json={'title': 'Dust'}).get_json()['task']['id']
    client.post(f'{house_url}/tasks/{task_id}/complete')

    body = client.get('/api/metrics').data.decode('utf-8')
    assert 'colivin_actions_total{action="task_completed"}' in body
    assert 'colivin_points_awarded_total{reason="task_completed"}' in body


def test_last_member_leaving_is_counted(db_session, alice):
    def left_count():
        return REGISTRY.get_sample_value('colivin_actions_total', {'action': 'house_left'}) or 0

    before = left_count()
    leave_house(create_house('Solo', alice), alice)
    assert left_count() == before + 1
