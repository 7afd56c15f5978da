import json

import pytest


JIRA_ENV_VARS = (
    'JIRA_URL',
    'JIRA_EMAIL',
    'JIRA_API_TOKEN',
    'JIRA_AUTH_TYPE',
    'JIRA_PROJECT',
    'JIRA_TIMEOUT_SECONDS',
    'LOG_FILE',
    'LOG_LEVEL',
)


@pytest.fixture()
def clean_settings(monkeypatch):
    from config import settings as settings_module
    for name in JIRA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


@pytest.fixture()
def fake_env(monkeypatch, tmp_path, clean_settings):
    monkeypatch.setenv('JIRA_URL', 'https://example.atlassian.net/')
    monkeypatch.setenv('JIRA_EMAIL', 'test@example.com')
    monkeypatch.setenv('JIRA_API_TOKEN', 'x')
    monkeypatch.setenv('LOG_FILE', str(tmp_path / 'jira_cli.log'))
    return True


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason='OK'):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload

    @property
    def text(self):
        return json.dumps(self._payload)


class RequestRecorder:
    '''Stands in for requests.Session.request; replays queued responses.'''

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, status_code=200, payload=None, reason='OK'):
        self.responses.append(FakeResponse(status_code, payload, reason))

    def queue_exception(self, exc):
        self.responses.append(exc)

    def __call__(self, session, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, 'session': session, **kwargs})
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return FakeResponse(404, {'errorMessages': ['not found']}, 'Not Found')


@pytest.fixture()
def fake_requests(monkeypatch):
    import requests
    recorder = RequestRecorder()

    def _fake(self, method, url, **kwargs):
        return recorder(self, method, url, **kwargs)

    monkeypatch.setattr(requests.Session, 'request', _fake)
    return recorder
