##########################################################################################
#
# Module: jql/period.py
#
# Description: Relative period resolution for created/updated filters.
#              Maps shorthand (-7d, 2m) and named periods (today, week) to JQL.
#
# Author: Cornelis Networks
#
##########################################################################################

import logging
import os
import re
import sys

# Logging config - follows jira_cli.py pattern
log = logging.getLogger(os.path.basename(sys.argv[0]))

PERIOD_PATTERN = re.compile(r'(-?[0-9]+)([dwmyh])', re.IGNORECASE)

# JQL uses M for months; m would be minutes
UNIT_MAP = {
    'h': 'h',
    'd': 'd',
    'w': 'w',
    'm': 'M',
    'y': 'y',
}

NAMED_PERIODS = {
    'today': 'startOfDay()',
    'yesterday': '-1d',
    'week': '-7d',
    'month': '-30d',
    'year': '-365d',
}


def resolve_period(period: str) -> str:
    '''
    Translate a period token into a JQL date expression.

    Input:
        period: Shorthand such as '-7d', '3w', '-1m', or one of
                today, yesterday, week, month, year (case-insensitive).

    Output:
        JQL date expression. Tokens matching neither form are returned
        unchanged so raw JQL expressions can be passed straight through.
    '''
    match = PERIOD_PATTERN.fullmatch(period)
    if match:
        count, unit = match.groups()
        resolved = f'{count}{UNIT_MAP[unit.lower()]}'
        log.debug(f'Period "{period}" -> {resolved}')
        return resolved

    resolved = NAMED_PERIODS.get(period.lower(), period)
    log.debug(f'Period "{period}" -> {resolved}')
    return resolved
