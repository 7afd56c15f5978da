##########################################################################################
#
# Module: jql/builder.py
#
# Description: Fluent JQL query builder used by the list commands.
#              Each filter method appends conditions; build() assembles the query.
#
# Author: Cornelis Networks
#
##########################################################################################

import logging
import os
import sys
from typing import Iterable, List, Optional, Union

from jql.assembler import assemble
from jql.models import Condition, Operator, OrderDirection, Ordering
from jql.period import resolve_period

# Logging config - follows jira_cli.py pattern
log = logging.getLogger(os.path.basename(sys.argv[0]))

NEGATION_PREFIX = '~'
UNASSIGNED_TOKENS = ('x', 'unassigned')
EPIC_LINK_FIELD = '"Epic Link"'

SPRINT_FUNCTIONS = {
    'active': 'openSprints()',
    'current': 'openSprints()',
    'future': 'futureSprints()',
    'closed': 'closedSprints()',
}


class JqlBuilder:
    '''
    Accumulates JQL conditions and renders them as a single query string.

    Conditions are append-only: calling a filter twice adds two AND-joined
    clauses. The ORDER BY directive is the exception, each call to
    order_by() replaces the previous one.

    A value prefixed with ~ asks for the negated form of status, type,
    priority, label and component filters.

    One builder serves one search. It is not thread safe.

    Example:
        jql = JqlBuilder().project('PROJ').status('~Done').order_by('updated').build()
        # project = "PROJ" AND status != "Done" ORDER BY updated DESC
    '''

    def __init__(self):
        self._conditions: List[Condition] = []
        self._ordering: Optional[Ordering] = None

    @property
    def conditions(self) -> tuple:
        '''Conditions added so far, in insertion order.'''
        return tuple(self._conditions)

    @property
    def ordering(self) -> Optional[Ordering]:
        return self._ordering

    # ------------------------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------------------------

    def project(self, key: str) -> 'JqlBuilder':
        return self._add('project', Operator.EQUALS, key)

    def assignee(self, user: str) -> 'JqlBuilder':
        '''Filter by assignee; "x" or "unassigned" select issues with no assignee.'''
        if user in UNASSIGNED_TOKENS:
            return self._add('assignee', Operator.IS, 'EMPTY')
        return self._add('assignee', Operator.EQUALS, user)

    def reporter(self, user: str) -> 'JqlBuilder':
        return self._add('reporter', Operator.EQUALS, user)

    def status(self, value: str) -> 'JqlBuilder':
        return self._add_negatable_scalar('status', value)

    def status_in(self, values: Iterable[str]) -> 'JqlBuilder':
        return self._add('status', Operator.IN, tuple(values))

    def status_not_in(self, values: Iterable[str]) -> 'JqlBuilder':
        return self._add('status', Operator.NOT_IN, tuple(values))

    def type(self, value: str) -> 'JqlBuilder':
        return self._add_negatable_scalar('issuetype', value)

    def priority(self, value: str) -> 'JqlBuilder':
        return self._add_negatable_scalar('priority', value)

    def label(self, value: str) -> 'JqlBuilder':
        '''Add one label filter as a single-element IN / NOT IN list.'''
        return self._add_negatable_list('labels', value)

    def labels(self, values: Iterable[str]) -> 'JqlBuilder':
        '''
        Add label filters in bulk.

        Plain labels are collected into one IN clause and ~-prefixed labels
        into one NOT IN clause. Either clause is skipped when empty.
        '''
        values = list(values)
        include = [v for v in values if not v.startswith(NEGATION_PREFIX)]
        exclude = [v[1:] for v in values if v.startswith(NEGATION_PREFIX)]

        if include:
            self._add('labels', Operator.IN, tuple(include))
        if exclude:
            self._add('labels', Operator.NOT_IN, tuple(exclude))
        return self

    def component(self, value: str) -> 'JqlBuilder':
        return self._add_negatable_list('component', value)

    def epic(self, key: str) -> 'JqlBuilder':
        return self._add(EPIC_LINK_FIELD, Operator.EQUALS, key)

    def sprint(self, value: Union[int, str]) -> 'JqlBuilder':
        '''
        Filter by sprint.

        Input:
            value: A sprint id (int), one of active/current/future/closed,
                   or a sprint name.
        '''
        if isinstance(value, int) and not isinstance(value, bool):
            return self._add('sprint', Operator.EQUALS, str(value))
        if value in SPRINT_FUNCTIONS:
            return self._add('sprint', Operator.IN, (SPRINT_FUNCTIONS[value],))
        return self._add('sprint', Operator.EQUALS, value)

    def fix_version(self, version: str) -> 'JqlBuilder':
        return self._add('fixVersion', Operator.EQUALS, version)

    def created(self, period: str) -> 'JqlBuilder':
        return self._add('created', Operator.GREATER_EQUAL, resolve_period(period))

    def updated(self, period: str) -> 'JqlBuilder':
        return self._add('updated', Operator.GREATER_EQUAL, resolve_period(period))

    def created_between(self, start: str, end: str) -> 'JqlBuilder':
        '''Restrict created date to [start, end]; dates are YYYY-MM-DD strings.'''
        self._add('created', Operator.GREATER_EQUAL, start)
        return self._add('created', Operator.LESS_EQUAL, end)

    def updated_between(self, start: str, end: str) -> 'JqlBuilder':
        self._add('updated', Operator.GREATER_EQUAL, start)
        return self._add('updated', Operator.LESS_EQUAL, end)

    def watcher(self, user: str) -> 'JqlBuilder':
        return self._add('watcher', Operator.EQUALS, user)

    def text(self, query: str) -> 'JqlBuilder':
        return self._add('text', Operator.CONTAINS, query)

    def raw(self, fragment: str) -> 'JqlBuilder':
        '''
        Append a JQL fragment verbatim.

        The fragment is not quoted, escaped or checked. The caller is
        responsible for its syntax, and must never pass untrusted input
        here since it is spliced directly into the query.
        '''
        return self._add('', Operator.RAW, fragment)

    def order_by(self, field: str, direction: Union[str, OrderDirection] = OrderDirection.DESC) -> 'JqlBuilder':
        '''
        Set the ORDER BY clause, replacing any earlier one.

        Raises:
            ValueError: If direction is a string other than ASC or DESC.
        '''
        self._ordering = Ordering(field, OrderDirection.parse(direction))
        return self

    # ------------------------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------------------------

    def build(self) -> str:
        '''Render the accumulated conditions and ordering as a JQL string.'''
        jql = assemble(self._conditions, self._ordering)
        log.debug(f'Built JQL: {jql}')
        return jql

    def __str__(self) -> str:
        return self.build()

    # ------------------------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------------------------

    def _add(self, field: str, operator: Operator, value) -> 'JqlBuilder':
        self._conditions.append(Condition(field, operator, value))
        return self

    def _add_negatable_scalar(self, field: str, value: str) -> 'JqlBuilder':
        if value.startswith(NEGATION_PREFIX):
            return self._add(field, Operator.NOT_EQUALS, value[1:])
        return self._add(field, Operator.EQUALS, value)

    def _add_negatable_list(self, field: str, value: str) -> 'JqlBuilder':
        if value.startswith(NEGATION_PREFIX):
            return self._add(field, Operator.NOT_IN, (value[1:],))
        return self._add(field, Operator.IN, (value,))
