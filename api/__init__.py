##########################################################################################
#
# Module: api
#
# Description: Jira REST API access for the CLI.
#
# Author: Cornelis Networks
#
##########################################################################################

from api.client import BasicAuthProvider, BearerAuthProvider, JiraClient, create_auth_provider
from api.issues import DEFAULT_FIELDS, IssueEndpoint

__all__ = [
    'BasicAuthProvider',
    'BearerAuthProvider',
    'JiraClient',
    'create_auth_provider',
    'DEFAULT_FIELDS',
    'IssueEndpoint',
]
