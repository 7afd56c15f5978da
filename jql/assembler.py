##########################################################################################
#
# Module: jql/assembler.py
#
# Description: Joins accumulated conditions into the final JQL string.
#
# Author: Cornelis Networks
#
##########################################################################################

from typing import Iterable, Optional

from jql.formatter import format_value
from jql.models import Condition, Operator, Ordering

CONJUNCTION = ' AND '


def render_condition(condition: Condition) -> str:
    '''Render one condition as "field operator value", or verbatim for RAW.'''
    if condition.operator is Operator.RAW:
        return condition.value

    formatted = format_value(condition.value, condition.operator)
    return f'{condition.field} {condition.operator.value} {formatted}'


def assemble(conditions: Iterable[Condition], ordering: Optional[Ordering] = None) -> str:
    '''
    Build a JQL string from conditions in insertion order.

    No validation is done on field names or on the resulting grammar.
    With an ordering and no conditions the result starts with
    " ORDER BY", leading space included.

    Input:
        conditions: Conditions in the order they were added.
        ordering: Optional ORDER BY directive.

    Output:
        JQL query string.
    '''
    jql = CONJUNCTION.join(render_condition(c) for c in conditions)

    if ordering is not None:
        jql += f' ORDER BY {ordering.field} {ordering.direction.value}'

    return jql
