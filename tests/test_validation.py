import pytest

from errors import InvalidDateError, InvalidIssueKeyError
from jql.validation import (
    is_valid_issue_key,
    parse_date,
    parse_date_range,
    parse_issue_keys,
    require_valid_issue_key,
    require_valid_issue_keys,
)


@pytest.mark.parametrize('key, valid', [
    ('PROJ-123', True),
    ('A-1', True),
    ('proj-123', False),
    ('PROJ123', False),
    ('PROJ-', False),
    ('PROJ-12a', False),
    ('PROJ-1\n', False),
    ('PROJ-٣', False),
])
def test_is_valid_issue_key(key, valid):
    assert is_valid_issue_key(key) is valid


def test_require_valid_issue_key_raises():
    with pytest.raises(InvalidIssueKeyError, match='bad'):
        require_valid_issue_key('bad')


def test_require_valid_issue_keys_lists_all_bad_keys():
    with pytest.raises(InvalidIssueKeyError) as excinfo:
        require_valid_issue_keys(['PROJ-1', 'x', 'y-2'])
    assert 'x, y-2' in excinfo.value.message


def test_parse_issue_keys():
    assert parse_issue_keys(' PROJ-1, PROJ-2  PROJ-3,,') == ['PROJ-1', 'PROJ-2', 'PROJ-3']


def test_parse_date_accepts_both_formats():
    assert parse_date('2024-02-29') == '2024-02-29'
    assert parse_date('02-29-2024') == '2024-02-29'


@pytest.mark.parametrize('text', ['2023-02-29', 'yesterday', '13-01-2024', ''])
def test_parse_date_rejects_invalid(text):
    with pytest.raises(InvalidDateError):
        parse_date(text)


def test_parse_date_range():
    assert parse_date_range('01-01-2024:2024-03-31') == ('2024-01-01', '2024-03-31')


@pytest.mark.parametrize('text', ['2024-01-01', '2024-01-01:2024-02-01:2024-03-01', '2024-03-01:2024-01-01'])
def test_parse_date_range_rejects_invalid(text):
    with pytest.raises(InvalidDateError):
        parse_date_range(text)


def test_require_valid_issue_keys_rejects_empty_list():
    with pytest.raises(InvalidIssueKeyError, match='no issue keys'):
        require_valid_issue_keys(parse_issue_keys(' , '))
