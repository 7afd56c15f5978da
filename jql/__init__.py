##########################################################################################
#
# Module: jql
#
# Description: JQL query construction for the Jira CLI.
#
# Author: Cornelis Networks
#
##########################################################################################

from jql.assembler import assemble, render_condition
from jql.builder import JqlBuilder
from jql.formatter import format_value, is_date_value, is_function_token, quote_value
from jql.models import Condition, Operator, OrderDirection, Ordering
from jql.period import resolve_period

__all__ = [
    'JqlBuilder',
    'Condition',
    'Operator',
    'OrderDirection',
    'Ordering',
    'assemble',
    'render_condition',
    'format_value',
    'quote_value',
    'is_date_value',
    'is_function_token',
    'resolve_period',
]
