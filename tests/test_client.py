import pytest
import requests

from api import IssueEndpoint, JiraClient
from api.issues import DEFAULT_FIELDS, SEARCH_ENDPOINT
from config.settings import Settings
from errors import JiraApiError, JiraConnectionError, JiraCredentialsError


def _settings(**overrides):
    values = {
        'jira_url': 'https://example.atlassian.net/',
        'jira_email': 'test@example.com',
        'jira_api_token': 'x',
    }
    values.update(overrides)
    return Settings(**values)


def test_basic_auth_and_url_join(fake_requests):
    fake_requests.queue(200, {'key': 'PROJ-1'})
    client = JiraClient(_settings())

    assert client.get('/rest/api/3/issue/PROJ-1') == {'key': 'PROJ-1'}

    call = fake_requests.calls[0]
    assert call['method'] == 'GET'
    assert call['url'] == 'https://example.atlassian.net/rest/api/3/issue/PROJ-1'
    assert call['session'].auth == ('test@example.com', 'x')
    assert call['timeout'] == 30


def test_bearer_auth_header(fake_requests):
    fake_requests.queue(200, {})
    client = JiraClient(_settings(jira_auth_type='bearer', jira_email=None, jira_api_token='pat'))
    client.get('/rest/api/3/myself')

    session = fake_requests.calls[0]['session']
    assert session.headers['Authorization'] == 'Bearer pat'
    assert session.auth is None


def test_missing_credentials():
    with pytest.raises(JiraCredentialsError):
        JiraClient(_settings(jira_email=None))
    with pytest.raises(JiraCredentialsError):
        JiraClient(_settings(jira_api_token=None))
    with pytest.raises(JiraCredentialsError):
        JiraClient(_settings(jira_url=''))


def test_none_params_are_dropped(fake_requests):
    fake_requests.queue(200, {})
    JiraClient(_settings()).get('/rest/api/3/search', params={'a': 1, 'b': None})
    assert fake_requests.calls[0]['params'] == {'a': 1}


def test_post_sends_json_body(fake_requests):
    fake_requests.queue(201, {'id': '10000'})
    result = JiraClient(_settings()).post('/rest/api/3/issue', {'fields': {}})
    assert result == {'id': '10000'}
    assert fake_requests.calls[0]['json'] == {'fields': {}}


def test_no_content_returns_none(fake_requests):
    fake_requests.queue(204, None)
    assert JiraClient(_settings()).delete('/rest/api/3/issue/PROJ-1') is None
    assert fake_requests.calls[0]['method'] == 'DELETE'


def test_put(fake_requests):
    fake_requests.queue(204, None)
    JiraClient(_settings()).put('/rest/api/3/issue/PROJ-1', {'fields': {'summary': 's'}})
    assert fake_requests.calls[0]['method'] == 'PUT'


def test_error_response_raises_api_error(fake_requests):
    fake_requests.queue(400, {'errorMessages': ["Field 'foo' does not exist"]}, 'Bad Request')
    with pytest.raises(JiraApiError) as excinfo:
        JiraClient(_settings()).get('/rest/api/3/search')
    assert excinfo.value.status_code == 400
    assert "Field 'foo' does not exist" in excinfo.value.message


def test_error_without_json_body_uses_reason(fake_requests):
    fake_requests.queue(503, None, 'Service Unavailable')
    with pytest.raises(JiraApiError, match='Service Unavailable'):
        JiraClient(_settings()).get('/rest/api/3/search')


def test_transport_failure_raises_connection_error(fake_requests):
    fake_requests.queue_exception(requests.ConnectionError('refused'))
    with pytest.raises(JiraConnectionError, match='refused'):
        JiraClient(_settings()).get('/rest/api/3/search')


def test_search_posts_jql(fake_requests):
    fake_requests.queue(200, {'issues': [{'key': 'PROJ-1'}], 'total': 1})
    endpoint = IssueEndpoint(JiraClient(_settings()))

    result = endpoint.search('project = "PROJ"', max_results=10)

    assert result['issues'] == [{'key': 'PROJ-1'}]
    call = fake_requests.calls[0]
    assert call['method'] == 'POST'
    assert call['url'].endswith(SEARCH_ENDPOINT)
    assert call['json'] == {'jql': 'project = "PROJ"', 'maxResults': 10, 'fields': DEFAULT_FIELDS}


def test_get_issue_with_fields(fake_requests):
    fake_requests.queue(200, {'key': 'PROJ-7'})
    IssueEndpoint(JiraClient(_settings())).get('PROJ-7', fields=['summary', 'status'])
    call = fake_requests.calls[0]
    assert call['url'].endswith('/rest/api/3/issue/PROJ-7')
    assert call['params'] == {'fields': 'summary,status'}
