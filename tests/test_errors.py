from errors import Error, JiraApiError, JiraConnectionError, JiraCredentialsError


def test_api_error_prefers_error_messages():
    e = JiraApiError(400, {'errorMessages': ['bad jql', 'really bad'], 'errors': {'f': 'x'}})
    assert e.message == 'Jira API error: bad jql, really bad'
    assert e.status_code == 400


def test_api_error_falls_back_to_field_errors():
    e = JiraApiError(400, {'errorMessages': [], 'errors': {'summary': 'required'}})
    assert e.message == 'Jira API error: required'


def test_api_error_falls_back_to_status():
    assert JiraApiError(502).message == 'Jira API error: HTTP 502'


def test_messages_are_prefixed():
    assert str(JiraConnectionError('timeout')) == 'Jira connection failed: timeout'
    assert str(JiraCredentialsError('missing')) == 'Jira credentials error: missing'


def test_hierarchy():
    assert issubclass(JiraApiError, Error)
    assert issubclass(JiraCredentialsError, Error)
