"""
Tests for the TemplatesClient class.
"""
import pytest
import requests
import responses

from src.services.exceptions import TemplateLoadError
from src.utils.templates_client import TemplatesClient

TEMPLATES_URL = "https://api.example.test/api/cycles/templates"

@pytest.fixture
def templates_client():
    """Create a TemplatesClient instance for testing."""
    return TemplatesClient(base_url="https://api.example.test/", timeout=1, retries=2)

def test_client_from_environment(monkeypatch):
    """Settings are read from the environment."""
    monkeypatch.setenv("TEMPLATES_API_URL", "https://api.example.test")
    monkeypatch.setenv("TEMPLATES_FETCH_RETRIES", "4")
    monkeypatch.setenv("TEMPLATES_FETCH_TIMEOUT", "2.5")

    client = TemplatesClient()
    assert client.base_url == "https://api.example.test"
    assert client.retries == 4
    assert client.timeout == 2.5

def test_client_defaults(monkeypatch):
    """Retries and timeout fall back to defaults."""
    monkeypatch.setenv("TEMPLATES_API_URL", "https://api.example.test")
    monkeypatch.delenv("TEMPLATES_FETCH_RETRIES", raising=False)
    monkeypatch.delenv("TEMPLATES_FETCH_TIMEOUT", raising=False)

    client = TemplatesClient()
    assert client.retries == 2
    assert client.timeout == 10.0

def test_client_requires_base_url(monkeypatch):
    """A missing base URL is a configuration error."""
    monkeypatch.delenv("TEMPLATES_API_URL", raising=False)
    with pytest.raises(EnvironmentError):
        TemplatesClient()

@responses.activate
def test_fetch_templates(templates_client, templates_payload):
    """Test fetching the template map."""
    responses.add(responses.GET, TEMPLATES_URL, json=templates_payload, status=200)

    result = templates_client.fetch_templates()
    assert result == templates_payload
    assert len(responses.calls) == 1
    assert responses.calls[0].request.headers["Cache-Control"] == "no-store"

@responses.activate
def test_fetch_templates_retries_server_errors(templates_client, templates_payload):
    """Server errors are retried."""
    responses.add(responses.GET, TEMPLATES_URL, json={"error": "unavailable"}, status=503)
    responses.add(responses.GET, TEMPLATES_URL, json=templates_payload, status=200)

    assert templates_client.fetch_templates() == templates_payload
    assert len(responses.calls) == 2

@responses.activate
def test_fetch_templates_retries_connection_errors(templates_client, templates_payload):
    """Connection errors and timeouts are retried."""
    responses.add(responses.GET, TEMPLATES_URL, body=requests.exceptions.ConnectionError("refused"))
    responses.add(responses.GET, TEMPLATES_URL, body=requests.exceptions.Timeout("slow"))
    responses.add(responses.GET, TEMPLATES_URL, json=templates_payload, status=200)

    assert templates_client.fetch_templates() == templates_payload
    assert len(responses.calls) == 3

@responses.activate
def test_fetch_templates_gives_up(templates_client):
    """Retries are bounded."""
    responses.add(responses.GET, TEMPLATES_URL, json={"error": "boom"}, status=500)

    with pytest.raises(TemplateLoadError):
        templates_client.fetch_templates()
    assert len(responses.calls) == 3

@responses.activate
def test_fetch_templates_client_error_not_retried(templates_client):
    """Client errors fail immediately."""
    responses.add(responses.GET, TEMPLATES_URL, json={"error": "not found"}, status=404)

    with pytest.raises(TemplateLoadError):
        templates_client.fetch_templates()
    assert len(responses.calls) == 1

@responses.activate
def test_fetch_templates_invalid_json(templates_client):
    """A non-JSON body fails immediately."""
    responses.add(responses.GET, TEMPLATES_URL, body="<html>oops</html>", status=200)

    with pytest.raises(TemplateLoadError):
        templates_client.fetch_templates()
    assert len(responses.calls) == 1
