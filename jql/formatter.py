##########################################################################################
#
# Module: jql/formatter.py
#
# Description: Value formatting for JQL conditions.
#              Decides whether a value is quoted, escaped, or emitted as-is.
#
# Author: Cornelis Networks
#
##########################################################################################

import re
from typing import Sequence, Union

from jql.models import Operator

# Relative date shorthand accepted by JQL (e.g. -7d, 2w, -1M)
DATE_SHORTHAND_PATTERN = re.compile(r'-?[0-9]+[dwmyh]', re.IGNORECASE)

# startOfDay() ... endOfYear()
PERIOD_FUNCTION_PATTERN = re.compile(r'(startOf|endOf)(Day|Week|Month|Year)\(\)', re.IGNORECASE)

FUNCTION_SUFFIX = '()'

Value = Union[str, Sequence[str]]


def is_function_token(value: str) -> bool:
    '''Return True for JQL function calls such as currentUser() or openSprints().'''
    return value.endswith(FUNCTION_SUFFIX)


def is_date_value(value: str) -> bool:
    '''
    Check whether a value is a JQL relative date or start/end-of-period function.

    Input:
        value: Scalar condition value.

    Output:
        True if the value must be emitted unquoted as a date expression.
    '''
    if DATE_SHORTHAND_PATTERN.fullmatch(value):
        return True
    if PERIOD_FUNCTION_PATTERN.fullmatch(value):
        return True
    return False


def quote_value(value: str) -> str:
    '''Wrap a value in double quotes, backslash-escaping embedded double quotes.'''
    escaped = value.replace('"', '\\"')
    return f'"{escaped}"'


def format_value(value: Value, operator: Operator) -> str:
    '''
    Render a condition value for inclusion in a JQL string.

    Rules, in order:
        - lists render as (v1, v2, ...) with each element quoted, unless the
          list is a single function token, which is emitted bare
        - the IS operator emits its value verbatim (EMPTY)
        - function tokens and date expressions are emitted verbatim
        - everything else is double quoted

    Input:
        value: A string, or a list/tuple of strings for IN / NOT IN.
        operator: The Operator the value pairs with.

    Output:
        Formatted value string.
    '''
    if not isinstance(value, str):
        items = list(value)
        if len(items) == 1 and is_function_token(items[0]):
            return items[0]
        formatted = ', '.join(quote_value(v) for v in items)
        return f'({formatted})'

    if operator is Operator.IS:
        return value

    if is_function_token(value):
        return value

    if is_date_value(value):
        return value

    return quote_value(value)
