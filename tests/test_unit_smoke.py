"""Unit tests for the smoke-test runner."""

import io
import json
import pytest
from api.smoke import SMOKE_ENDPOINTS, main, run_smoke
from core.errors import DecodeError, SigningError, TransportError
from unittest.mock import MagicMock, patch


@pytest.fixture
def client():
    client = MagicMock()
    client.base_url = 'http://wp.test'
    client.api_path.side_effect = lambda endpoint: f"/api/v0/{endpoint}"
    client.get.side_effect = lambda resource: {'error': None, 'resource': resource}
    client.logout.return_value = {'error': None}
    return client


def test_endpoint_list():
    assert SMOKE_ENDPOINTS[0] == '/api/v0/albums'
    assert '/api/v0/search/song' in SMOKE_ENDPOINTS
    assert '/api/v0/logout' not in SMOKE_ENDPOINTS
    assert len(SMOKE_ENDPOINTS) == 10


def test_runs_every_endpoint_in_order(client):
    out = io.StringIO()

    assert run_smoke(client, 'test', 'test', out=out) == 0

    client.login.assert_called_once_with('test', 'test', client=None)
    assert [c.args[0] for c in client.get.call_args_list] == SMOKE_ENDPOINTS
    client.logout.assert_called_once()

    lines = out.getvalue().splitlines()
    assert lines[0] == '/api/v0/albums:'
    assert json.loads(lines[1]) == {'error': None, 'resource': '/api/v0/albums'}
    assert lines[-2] == '/api/v0/logout:'


def test_custom_endpoints(client):
    out = io.StringIO()
    assert run_smoke(client, 'u', 'p', endpoints=['/api/v0/status'], out=out, client_name='ci') == 0
    client.login.assert_called_once_with('u', 'p', client='ci')
    assert client.get.call_count == 1


def test_login_failure_aborts(client):
    client.login.side_effect = DecodeError("Login response has no session")
    out = io.StringIO()

    assert run_smoke(client, 'test', 'test', out=out) == 1

    client.get.assert_not_called()
    client.logout.assert_not_called()
    assert 'DecodeError: Login response has no session' in out.getvalue()


def test_transport_failure_stops_at_first_error(client):
    def fail_on_artists(resource):
        if resource.startswith('/api/v0/artists'):
            raise TransportError(f"No data returned from {resource}")
        return {'error': None}

    client.get.side_effect = fail_on_artists
    out = io.StringIO()

    assert run_smoke(client, 'test', 'test', out=out) == 1
    assert client.get.call_count == 3
    client.logout.assert_not_called()
    assert out.getvalue().endswith('TransportError: No data returned from /api/v0/artists\n')


@patch('api.smoke.run_smoke', return_value=0)
@patch('api.smoke.WavepipeClient')
@patch('api.smoke.setup_logging')
def test_main_exits_with_run_code(mock_setup, mock_client_cls, mock_run):
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 0
    mock_setup.assert_called_once()
    mock_run.assert_called_once()
    mock_client_cls.return_value.__exit__.assert_called_once()


def test_signing_failure_reported(client):
    client.get.side_effect = SigningError("nonce length must not be negative, got -1")
    out = io.StringIO()

    assert run_smoke(client, 'test', 'test', out=out) == 1
    assert client.get.call_count == 1
    assert out.getvalue().endswith('SigningError: nonce length must not be negative, got -1\n')
