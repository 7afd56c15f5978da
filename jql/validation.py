##########################################################################################
#
# Module: jql/validation.py
#
# Description: Validation of CLI inputs that feed the JQL builder:
#              issue keys and calendar dates / date ranges.
#
# Author: Cornelis Networks
#
##########################################################################################

import logging
import os
import re
import sys
from datetime import datetime
from typing import List, Tuple

from errors import InvalidDateError, InvalidIssueKeyError

# Logging config - follows jira_cli.py pattern
log = logging.getLogger(os.path.basename(sys.argv[0]))

ISSUE_KEY_PATTERN = re.compile(r'[A-Z]+-[0-9]+')

# Accepted input formats, tried in order
DATE_FORMATS = ('%Y-%m-%d', '%m-%d-%Y')


def is_valid_issue_key(key: str) -> bool:
    return bool(ISSUE_KEY_PATTERN.fullmatch(key))


def require_valid_issue_key(key: str) -> None:
    '''
    Raises:
        InvalidIssueKeyError: If key is not in PROJECT-123 form.
    '''
    if not is_valid_issue_key(key):
        raise InvalidIssueKeyError(f'{key}. Issue keys must be in the format: PROJECT-123')


def require_valid_issue_keys(keys: List[str]) -> None:
    '''
    Raises:
        InvalidIssueKeyError: If keys is empty or any key is not in PROJECT-123 form.
    '''
    if not keys:
        raise InvalidIssueKeyError('no issue keys given')
    invalid = [k for k in keys if not is_valid_issue_key(k)]
    if invalid:
        raise InvalidIssueKeyError(f'{", ".join(invalid)}. Issue keys must be in the format: PROJECT-123')


def parse_issue_keys(text: str) -> List[str]:
    '''Split "A-1, B-2 C-3" into ['A-1', 'B-2', 'C-3'].'''
    return [k.strip() for k in re.split(r'[\s,]+', text) if k.strip()]


def parse_date(text: str) -> str:
    '''
    Parse a calendar date given as YYYY-MM-DD or MM-DD-YYYY.

    Input:
        text: Date string from the command line.

    Output:
        The date as a YYYY-MM-DD string.

    Raises:
        InvalidDateError: If the text is not a valid date in either format.
    '''
    value = text.strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        result = parsed.strftime('%Y-%m-%d')
        log.debug(f'Parsed date "{text}" -> {result}')
        return result

    log.error(f'Invalid date: {text}')
    raise InvalidDateError(f'{text}. Expected YYYY-MM-DD or MM-DD-YYYY')


def parse_date_range(text: str) -> Tuple[str, str]:
    '''
    Parse a START:END date range.

    Output:
        Tuple of (start, end) YYYY-MM-DD strings.

    Raises:
        InvalidDateError: If the range is malformed or start is after end.
    '''
    parts = text.split(':')
    if len(parts) != 2:
        raise InvalidDateError(f'{text}. Expected START:END')

    start, end = parse_date(parts[0]), parse_date(parts[1])
    # ISO strings compare in date order
    if start > end:
        raise InvalidDateError(f'{text}. Start date is after end date')

    return start, end
