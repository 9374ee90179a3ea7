import pytest
import requests

from conftest import BASE, FakeResponse, FakeSession
from te_nodes.credentials import Credential
from te_nodes.errors import AuthenticationError, QueryError
from te_nodes.te_client import TEClient


def test_authenticate_keeps_token_and_credentials(client, session):
    client.authenticate()
    assert client.authenticated
    assert (client.token_name, client.token_value) == ("CSRFToken", "abc123")
    assert session.auth == ("admin", "s3cret")
    assert session.calls[0]["url"] == f"{BASE}/csrf-token"


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credentials(client, routes, status):
    routes[("GET", "/csrf-token")] = FakeResponse(status, text="denied")
    with pytest.raises(AuthenticationError) as exc:
        client.authenticate()
    assert exc.value.status_code == status
    assert not client.authenticated


def test_unreachable_endpoint(client, routes):
    routes[("GET", "/csrf-token")] = requests.ConnectionError("no route to host")
    with pytest.raises(AuthenticationError):
        client.authenticate()


def test_token_missing_from_response(client, routes):
    routes[("GET", "/csrf-token")] = FakeResponse(200, {"tokenName": "CSRFToken"})
    with pytest.raises(AuthenticationError):
        client.authenticate()


def test_calls_before_authenticate_are_refused(client):
    with pytest.raises(AuthenticationError):
        client.get("/nodes", QueryError)


def test_verify_defaults_on_and_is_scoped_to_session():
    s = FakeSession()
    TEClient(BASE, Credential("a", "b"), session=s)
    assert s.verify is True


def test_insecure_logs_warning(caplog):
    s = FakeSession()
    with caplog.at_level("WARNING", logger="te_nodes"):
        TEClient(BASE, Credential("a", "b"), verify=False, session=s)
    assert s.verify is False
    assert "verification is DISABLED" in caplog.text


def test_context_manager_closes_session():
    s = FakeSession()
    with TEClient(BASE + "/", Credential("a", "b"), session=s) as c:
        assert c.base_url == BASE
    assert s.closed


def test_redirect_on_token_fetch_is_not_a_login(client, routes):
    routes[("GET", "/csrf-token")] = FakeResponse(302, text="")
    with pytest.raises(AuthenticationError) as exc:
        client.authenticate()
    assert exc.value.status_code == 302


def test_non_2xx_get_is_an_error(client, routes):
    routes[("GET", "/nodes")] = FakeResponse(304, text="")
    client.authenticate()
    with pytest.raises(QueryError):
        client.get("/nodes", QueryError)
