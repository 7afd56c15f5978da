##########################################################################################
#
# Module: errors.py
#
# Description: Exceptions raised by the Jira CLI and its API client.
#
# Author: Cornelis Networks
#
##########################################################################################

from typing import Any, Dict, Optional


class Error(Exception):
    '''
    Base class for exceptions in this package.
    '''
    pass

class JiraConnectionError(Error):
    '''
    Exception raised when the Jira server cannot be reached.
    '''
    def __init__(self, message):
        self.message = f'Jira connection failed: {message}'
        super().__init__(self.message)

class JiraCredentialsError(Error):
    '''
    Exception raised when Jira credentials are missing or invalid.
    '''
    def __init__(self, message):
        self.message = f'Jira credentials error: {message}'
        super().__init__(self.message)

class JiraApiError(Error):
    '''
    Exception raised when the Jira REST API returns a non-2xx response.

    Attributes:
        status_code: HTTP status code.
        response: Parsed error body ({'errorMessages': [...], 'errors': {...}}).
    '''
    def __init__(self, status_code: int, response: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.response = response or {}

        detail = (
            ', '.join(self.response.get('errorMessages') or [])
            or ', '.join(str(v) for v in (self.response.get('errors') or {}).values())
            or f'HTTP {status_code}'
        )
        self.message = f'Jira API error: {detail}'
        super().__init__(self.message)

class InvalidDateError(Error):
    '''
    Exception raised when a date or date range flag cannot be parsed.
    '''
    def __init__(self, message):
        self.message = f'Invalid date: {message}'
        super().__init__(self.message)

class InvalidIssueKeyError(Error):
    '''
    Exception raised when an issue key is not in PROJECT-123 form.
    '''
    def __init__(self, message):
        self.message = f'Invalid issue key: {message}'
        super().__init__(self.message)
