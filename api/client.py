##########################################################################################
#
# Module: api/client.py
#
# Description: Minimal Jira REST client.
#              Executes GET/POST/PUT/DELETE against the configured server and
#              returns parsed JSON or raises a typed API error.
#
# Author: Cornelis Networks
#
##########################################################################################

import logging
import os
import sys
from typing import Any, Dict, Optional

import requests

from config.settings import Settings
from errors import JiraApiError, JiraConnectionError, JiraCredentialsError

# Logging config - follows jira_cli.py pattern
log = logging.getLogger(os.path.basename(sys.argv[0]))


# ****************************************************************************************
# Authentication
# ****************************************************************************************

class BasicAuthProvider:
    '''Email + API token, sent as HTTP basic auth.'''

    def __init__(self, email: str, api_token: str):
        if not email:
            raise JiraCredentialsError('JIRA_EMAIL environment variable not set')
        if not api_token:
            raise JiraCredentialsError('JIRA_API_TOKEN environment variable not set')
        self.email = email
        self.api_token = api_token

    def apply(self, session: requests.Session) -> None:
        session.auth = (self.email, self.api_token)


class BearerAuthProvider:
    '''Personal access token, sent as an Authorization: Bearer header.'''

    def __init__(self, api_token: str):
        if not api_token:
            raise JiraCredentialsError('JIRA_API_TOKEN environment variable not set')
        self.api_token = api_token

    def apply(self, session: requests.Session) -> None:
        session.headers['Authorization'] = f'Bearer {self.api_token}'


def create_auth_provider(settings: Settings):
    '''
    Pick the auth provider for the configured auth type.

    Raises:
        JiraCredentialsError: If the auth type is unknown or credentials are missing.
    '''
    if settings.jira_auth_type == 'bearer':
        return BearerAuthProvider(settings.jira_api_token)
    if settings.jira_auth_type == 'basic':
        return BasicAuthProvider(settings.jira_email, settings.jira_api_token)
    raise JiraCredentialsError(f'Unknown auth type: {settings.jira_auth_type}')


# ****************************************************************************************
# Client
# ****************************************************************************************

class JiraClient:
    '''
    Thin wrapper around a requests session bound to one Jira server.
    '''

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        if not settings.jira_url:
            raise JiraCredentialsError('Jira server URL not configured (set JIRA_URL)')

        self.base_url = settings.jira_url.rstrip('/')
        self.timeout = settings.request_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        create_auth_provider(settings).apply(self.session)

    def request(self, method: str, endpoint: str, params: Optional[Dict[str, Any]] = None,
                body: Any = None) -> Any:
        '''
        Execute a request against the Jira REST API.

        Input:
            method: HTTP method (GET, POST, PUT, DELETE).
            endpoint: Path such as /rest/api/3/issue/PROJ-1.
            params: Query parameters; None values are dropped.
            body: JSON-serialisable request body.

        Output:
            Parsed JSON response, or None for 204 No Content.

        Raises:
            JiraApiError: On a non-2xx response.
            JiraConnectionError: If the request could not be sent.
        '''
        url = f'{self.base_url}/{endpoint.lstrip("/")}'
        query = {k: v for k, v in (params or {}).items() if v is not None}
        log.debug(f'{method} {url} params={query}')

        try:
            response = self.session.request(
                method,
                url,
                params=query or None,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f'{method} {url} failed: {e}')
            raise JiraConnectionError(str(e))

        if not response.ok:
            try:
                error_body = response.json()
            except ValueError:
                error_body = {'errorMessages': [response.reason or f'HTTP {response.status_code}']}
            log.error(f'API request failed: {response.status_code} - {error_body}')
            raise JiraApiError(response.status_code, error_body)

        if response.status_code == 204:
            return None

        return response.json()

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint: str, body: Any = None) -> Any:
        return self.request('POST', endpoint, body=body)

    def put(self, endpoint: str, body: Any = None) -> Any:
        return self.request('PUT', endpoint, body=body)

    def delete(self, endpoint: str) -> Any:
        return self.request('DELETE', endpoint)
