##########################################################################################
#
# Module: api/issues.py
#
# Description: Issue search and lookup endpoints.
#
# Author: Cornelis Networks
#
##########################################################################################

import logging
import os
import sys
from typing import Any, Dict, List, Optional

from api.client import JiraClient

# Logging config - follows jira_cli.py pattern
log = logging.getLogger(os.path.basename(sys.argv[0]))

SEARCH_ENDPOINT = '/rest/api/3/search/jql'

DEFAULT_FIELDS = [
    'summary',
    'status',
    'assignee',
    'reporter',
    'priority',
    'issuetype',
    'project',
    'labels',
    'components',
    'fixVersions',
    'created',
    'updated',
    'resolution',
    'parent',
]


class IssueEndpoint:
    '''Issue operations on top of a JiraClient.'''

    def __init__(self, client: JiraClient):
        self.client = client

    def search(self, jql: str, max_results: int = 50, fields: Optional[List[str]] = None) -> Dict[str, Any]:
        '''
        Run a JQL search and return the first page of results.

        Input:
            jql: JQL query string.
            max_results: Maximum number of issues to return.
            fields: Issue fields to fetch (defaults to DEFAULT_FIELDS).

        Output:
            Parsed search response ({'issues': [...], ...}).
        '''
        log.debug(f'Entering search(jql={jql}, max_results={max_results})')
        payload = {
            'jql': jql,
            'maxResults': max_results,
            'fields': fields or DEFAULT_FIELDS,
        }
        data = self.client.post(SEARCH_ENDPOINT, payload) or {}
        log.debug(f'Retrieved {len(data.get("issues", []))} issues')
        return data

    def get(self, key: str, fields: Optional[List[str]] = None) -> Dict[str, Any]:
        '''Fetch a single issue by key.'''
        log.debug(f'Entering get(key={key})')
        params = {'fields': ','.join(fields)} if fields else None
        return self.client.get(f'/rest/api/3/issue/{key}', params=params)
