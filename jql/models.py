##########################################################################################
#
# Module: jql/models.py
#
# Description: Data model for JQL query construction.
#              Conditions are immutable records; ordering is a single optional directive.
#
# Author: Cornelis Networks
#
##########################################################################################

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Operator(Enum):
    '''JQL operators understood by the query assembler.'''
    EQUALS = '='
    NOT_EQUALS = '!='
    IN = 'IN'
    NOT_IN = 'NOT IN'
    IS = 'IS'
    CONTAINS = '~'
    GREATER_EQUAL = '>='
    LESS_EQUAL = '<='
    # Value is emitted verbatim, with no field or operator
    RAW = 'RAW'


class OrderDirection(Enum):
    '''Sort direction for the ORDER BY clause.'''
    ASC = 'ASC'
    DESC = 'DESC'

    @classmethod
    def parse(cls, direction: Union[str, 'OrderDirection']) -> 'OrderDirection':
        '''
        Coerce a direction string (case-insensitive) or member to an OrderDirection.

        Raises:
            ValueError: If the string is not ASC or DESC.
        '''
        if isinstance(direction, cls):
            return direction
        return cls(str(direction).upper())


@dataclass(frozen=True)
class Condition:
    '''
    One JQL filter clause.

    Attributes:
        field: JQL field name, already quoted if it has spaces (e.g. "Epic Link").
        operator: The Operator for this clause.
        value: A single string, or a tuple of strings for IN / NOT IN.
    '''
    field: str
    operator: Operator
    value: Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class Ordering:
    '''The ORDER BY directive.'''
    field: str
    direction: OrderDirection = OrderDirection.DESC
