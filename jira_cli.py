#!/usr/bin/env python3
##########################################################################################
#
# Script name: jira_cli.py
#
# Description: Command line client for searching Jira issues and epics.
#              Translates filter flags into JQL and prints the results.
#
# Author: Cornelis Networks
#
# Credentials:
#   Set the following environment variables (or put them in a .env file):
#      export JIRA_URL="https://yourcompany.atlassian.net"
#      export JIRA_EMAIL="your.email@yourcompany.com"
#      export JIRA_API_TOKEN="your_api_token_here"
#
#   NEVER commit credentials to version control.
#
##########################################################################################

import argparse
import json
import logging
import os
import re
import sys
from datetime import date, datetime

from api import IssueEndpoint, JiraClient
from config import configure_logging, get_settings, load_env_file
from errors import (
    InvalidDateError,
    InvalidIssueKeyError,
    JiraApiError,
    JiraConnectionError,
    JiraCredentialsError,
)
from jql import JqlBuilder
from jql.validation import (
    parse_date_range,
    parse_issue_keys,
    require_valid_issue_key,
    require_valid_issue_keys,
)

# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

# Logging config
log = logging.getLogger(os.path.basename(sys.argv[0]))

# Output control - set by handle_args() / main()
_quiet_mode = False
_file_handler = None


def output(message=''):
    '''
    Print user-facing output, respecting quiet mode.
    Always logs to file regardless of quiet mode.

    Input:
        message: String to output (default empty for blank line).
    '''
    if message and _file_handler is not None:
        record = logging.LogRecord(
            name=log.name,
            level=logging.INFO,
            pathname=__file__,
            lineno=0,
            msg=f'OUTPUT: {message}',
            args=(),
            exc_info=None,
            func='output'
        )
        _file_handler.emit(record)

    if not _quiet_mode:
        print(message)


def _short_date(value):
    '''Reduce an ISO timestamp to YYYY-MM-DD.'''
    if not value:
        return 'N/A'
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00')).strftime('%Y-%m-%d')
    except ValueError:
        return value[:10]


def _truncate(value, width):
    if len(value) > width:
        return value[:width] + '..'
    return value


def print_ticket_table_header():
    '''Print the header row for ticket tables.'''
    output('-' * 140)
    output(f'{"Key":<15} {"Type":<12} {"Status":<14} {"Priority":<10} {"Created":<12} {"Updated":<12} {"Assignee":<18} {"Summary":<40}')
    output('-' * 140)


def print_ticket_row(issue):
    '''
    Print a single ticket row in the standard table format.

    Input:
        issue: Issue dict from Jira API.
    '''
    key = issue.get('key', 'N/A')
    fields = issue.get('fields', {}) or {}

    issue_type = (fields.get('issuetype') or {}).get('name', 'N/A')
    status = (fields.get('status') or {}).get('name', 'N/A')
    priority = (fields.get('priority') or {}).get('name', 'N/A')
    assignee = (fields.get('assignee') or {}).get('displayName', 'Unassigned')
    summary = fields.get('summary') or 'N/A'

    created = _short_date(fields.get('created'))
    updated = _short_date(fields.get('updated'))

    output(
        f'{key:<15} {_truncate(issue_type, 10):<12} {_truncate(status, 12):<14} '
        f'{_truncate(priority, 8):<10} {created:<12} {updated:<12} '
        f'{_truncate(assignee, 16):<18} {_truncate(summary, 38):<40}'
    )


def print_ticket_table_footer(count, total=None):
    '''Print the footer row for ticket tables.'''
    output('=' * 140)
    if total is not None and total > count:
        output(f'Showing {count} of {total} tickets')
    else:
        output(f'Total: {count} tickets')
    output('')


def issue_summary(issue):
    '''Flatten an issue dict into the fields used for JSON output.'''
    fields = issue.get('fields', {}) or {}
    return {
        'key': issue.get('key'),
        'summary': fields.get('summary'),
        'status': (fields.get('status') or {}).get('name'),
        'assignee': (fields.get('assignee') or {}).get('displayName'),
        'priority': (fields.get('priority') or {}).get('name'),
        'type': (fields.get('issuetype') or {}).get('name'),
        'labels': fields.get('labels') or [],
        'created': fields.get('created'),
        'updated': fields.get('updated'),
    }


# ****************************************************************************************
# JQL construction
# ****************************************************************************************

def _sprint_value(value):
    '''Sprint ids arrive as strings from argparse; ASCII digits mean a sprint id.'''
    return int(value) if re.fullmatch(r'[0-9]+', value) else value


def build_issue_jql(args, project=None):
    '''
    Build the JQL for the issues command from parsed arguments.

    Input:
        args: argparse.Namespace from the issues sub-parser.
        project: Project key to restrict to, or None.

    Output:
        JQL string. --jql bypasses the builder entirely.

    Raises:
        InvalidIssueKeyError: If --epic is not a valid issue key.
        InvalidDateError: If --created-between is not a valid range.
    '''
    if args.jql:
        return args.jql

    builder = JqlBuilder()

    if project:
        builder.project(project)
    if args.assignee:
        builder.assignee(args.assignee)
    if args.reporter:
        builder.reporter(args.reporter)
    if args.status:
        builder.status(args.status)
    if args.type:
        builder.type(args.type)
    if args.priority:
        builder.priority(args.priority)
    if args.label:
        builder.labels(args.label)
    if args.component:
        builder.component(args.component)
    if args.epic:
        require_valid_issue_key(args.epic)
        builder.epic(args.epic)
    if args.sprint:
        builder.sprint(_sprint_value(args.sprint))
    if args.fix_version:
        builder.fix_version(args.fix_version)
    if args.watching:
        builder.watcher('currentUser()')
    if args.created:
        builder.created(args.created)
    if args.updated:
        builder.updated(args.updated)
    if args.created_between:
        start, end = parse_date_range(args.created_between)
        builder.created_between(start, end)
    if args.text:
        builder.text(args.text)
    if args.where:
        builder.raw(args.where)

    builder.order_by(args.order_by, 'ASC' if args.reverse else 'DESC')
    return builder.build()


def build_epic_jql(args, project=None):
    '''
    Build the JQL for the epics command. Always restricted to issuetype Epic.
    '''
    if args.jql:
        return args.jql

    builder = JqlBuilder()

    if project:
        builder.project(project)
    builder.type('Epic')

    if args.assignee:
        builder.assignee(args.assignee)
    if args.status:
        builder.status(args.status)
    if args.label:
        builder.labels(args.label)
    if args.created:
        builder.created(args.created)
    if args.updated:
        builder.updated(args.updated)

    builder.order_by(args.order_by, 'ASC' if args.reverse else 'DESC')
    return builder.build()


# ****************************************************************************************
# Command handlers
# ****************************************************************************************

def _resolve_project(args, settings):
    return args.project or settings.jira_project


def run_search(jql, args, settings, label='tickets'):
    '''
    Execute a JQL search and print the results.

    Input:
        jql: Query string.
        args: Parsed arguments (output, limit, show_jql).
        settings: Settings instance.
        label: Noun used in the result heading.
    '''
    log.debug(f'JQL query: {jql}')
    if args.show_jql:
        output(f'JQL: {jql}')
        output('')

    endpoint = IssueEndpoint(JiraClient(settings))
    result = endpoint.search(jql, max_results=args.limit)
    issues = result.get('issues', [])

    if args.output == 'json':
        output(json.dumps({
            'issues': [issue_summary(i) for i in issues],
            'total': result.get('total', len(issues)),
        }, indent=2))
        return 0

    output('')
    output(f'{label.capitalize()} matching: {jql}')
    print_ticket_table_header()
    for issue in issues:
        print_ticket_row(issue)
    print_ticket_table_footer(len(issues), result.get('total'))
    return 0


def cmd_issues(args):
    '''
    List issues matching the filter flags.
    '''
    settings = get_settings()
    project = _resolve_project(args, settings)
    log.debug(f'cmd_issues(project={project})')
    return run_search(build_issue_jql(args, project), args, settings)


def cmd_epics(args):
    '''
    List epics matching the filter flags.
    '''
    settings = get_settings()
    project = _resolve_project(args, settings)
    log.debug(f'cmd_epics(project={project})')
    return run_search(build_epic_jql(args, project), args, settings, label='epics')


def _print_issue(summary, settings):
    output('')
    output('=' * 80)
    output(f'{summary["key"]}: {summary["summary"] or "N/A"}')
    output('=' * 80)
    output(f'Type:      {summary["type"] or "N/A"}')
    output(f'Status:    {summary["status"] or "N/A"}')
    output(f'Priority:  {summary["priority"] or "N/A"}')
    output(f'Assignee:  {summary["assignee"] or "Unassigned"}')
    output(f'Labels:    {", ".join(summary["labels"]) or "None"}')
    output(f'Created:   {_short_date(summary["created"])}')
    output(f'Updated:   {_short_date(summary["updated"])}')
    output(f'URL:       {settings.jira_url.rstrip("/")}/browse/{summary["key"]}')
    output('')


def cmd_view(args):
    '''
    Show one or more issues.

    Keys may be given as separate arguments or comma separated. Every key
    is validated before the first request is sent. JSON output is a single
    object for one key and a list otherwise.
    '''
    keys = parse_issue_keys(' '.join(args.keys))
    log.debug(f'cmd_view(keys={keys})')
    require_valid_issue_keys(keys)

    settings = get_settings()
    endpoint = IssueEndpoint(JiraClient(settings))
    summaries = [issue_summary(endpoint.get(key)) for key in keys]

    if args.output == 'json':
        payload = summaries[0] if len(summaries) == 1 else summaries
        output(json.dumps(payload, indent=2))
        return 0

    for summary in summaries:
        _print_issue(summary, settings)
    return 0


# ****************************************************************************************
# Argument handling
# ****************************************************************************************

def _add_listing_args(parser):
    '''Arguments shared by the issues and epics commands.'''
    parser.add_argument('-a', '--assignee', metavar='USER',
                        help="Filter by assignee (use 'x' for unassigned).")
    parser.add_argument('-s', '--status',
                        help='Filter by status (prefix with ~ to exclude).')
    parser.add_argument('-l', '--label', action='append', default=[],
                        help='Filter by label, repeatable (prefix with ~ to exclude).')
    parser.add_argument('--created', metavar='PERIOD',
                        help='Created time filter (e.g. -7d, week, month).')
    parser.add_argument('--updated', metavar='PERIOD',
                        help='Updated time filter.')
    parser.add_argument('--jql', metavar='QUERY',
                        help='Raw JQL query; other filters are ignored.')
    parser.add_argument('--order-by', dest='order_by', default='created', metavar='FIELD',
                        help='Sort field (default: created).')
    parser.add_argument('--reverse', action='store_true',
                        help='Reverse sort order (ASC).')
    parser.add_argument('--limit', type=int, default=50,
                        help='Maximum results (default: 50).')


def build_parser():
    '''
    Create the argument parser with all sub-commands.
    '''
    parser = argparse.ArgumentParser(
        description='Jira command line client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s issues --project PROJ --status "~Done" --assignee x
  %(prog)s issues -p PROJ -l backend -l ~frontend --sprint active
  %(prog)s issues -p PROJ --created week --order-by updated --reverse
  %(prog)s issues -p PROJ --created=-2w
  %(prog)s issues -p PROJ --created-between 2024-01-01:2024-03-31
  %(prog)s issues --jql "assignee = currentUser() AND status != Done"
  %(prog)s epics -p PROJ --status "In Progress"
  %(prog)s view PROJ-123
  %(prog)s view PROJ-1,PROJ-2 PROJ-3

Periods (use --created=-7d form for negative values):
  -7d, 2w, -1m, 1y, -4h    Relative to now (m means months)
  today                    Since start of day
  yesterday, week          Last 1 / 7 days
  month, year              Last 30 / 365 days
        ''')

    # Global options
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose output to stdout.')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Minimal stdout.')
    parser.add_argument('--env', type=str, default=None, metavar='FILE',
                        help='Path to an alternate dotenv file to load.')
    parser.add_argument('-p', '--project', metavar='KEY',
                        help='Project key (default: JIRA_PROJECT).')
    parser.add_argument('-o', '--output', choices=['table', 'json'], default='table',
                        help='Output format (default: table).')
    parser.add_argument('--show-jql', action='store_true', dest='show_jql',
                        help='Print the generated JQL before the results.')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Issues command
    issues_parser = subparsers.add_parser('issues', aliases=['ls'], help='List issues')
    _add_listing_args(issues_parser)
    issues_parser.add_argument('-r', '--reporter', metavar='USER',
                               help='Filter by reporter.')
    issues_parser.add_argument('-t', '--type',
                               help='Filter by issue type (prefix with ~ to exclude).')
    issues_parser.add_argument('-y', '--priority',
                               help='Filter by priority (prefix with ~ to exclude).')
    issues_parser.add_argument('-C', '--component',
                               help='Filter by component (prefix with ~ to exclude).')
    issues_parser.add_argument('-e', '--epic', metavar='KEY',
                               help='Filter by epic link.')
    issues_parser.add_argument('--sprint',
                               help='Sprint id, name, or active/current/future/closed.')
    issues_parser.add_argument('--fix-version', dest='fix_version', metavar='VERSION',
                               help='Filter by fix version.')
    issues_parser.add_argument('-w', '--watching', action='store_true',
                               help="Issues I'm watching.")
    issues_parser.add_argument('--created-between', dest='created_between', metavar='START:END',
                               help='Created within a date range (YYYY-MM-DD or MM-DD-YYYY).')
    issues_parser.add_argument('--text', metavar='QUERY',
                               help='Free text search.')
    issues_parser.add_argument('--where', metavar='FRAGMENT',
                               help='Extra JQL fragment appended as-is.')
    issues_parser.set_defaults(func=cmd_issues)

    # Epics command
    epics_parser = subparsers.add_parser('epics', help='List epics')
    _add_listing_args(epics_parser)
    epics_parser.set_defaults(func=cmd_epics)

    # View command
    view_parser = subparsers.add_parser('view', help='Show one or more issues')
    view_parser.add_argument('keys', nargs='+', metavar='KEY',
                             help='Issue keys, space or comma separated (e.g. PROJ-1,PROJ-2).')
    view_parser.set_defaults(func=cmd_view)

    return parser


def handle_args(argv=None):
    '''
    Parse CLI arguments and configure logging.

    Input:
        argv: Argument list (defaults to sys.argv[1:]).

    Output:
        argparse.Namespace containing parsed arguments.
    '''
    global _quiet_mode, _file_handler

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.env:
        load_env_file(args.env)

    _quiet_mode = args.quiet

    if args.verbose:
        console_level = logging.DEBUG
    elif args.quiet:
        console_level = logging.ERROR
    else:
        console_level = logging.WARNING
    _file_handler = configure_logging(get_settings(), console_level)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    log.info('++++++++++++++++++++++++++++++++++++++++++++++')
    log.info(f'+  {os.path.basename(sys.argv[0])}')
    log.info(f'+  Python Version: {sys.version.split()[0]}')
    log.info(f'+  Today is: {date.today()}')
    log.info(f'+  Jira URL: {settings.jira_url}')
    log.info(f'+  Command: {args.command}')
    log.info('++++++++++++++++++++++++++++++++++++++++++++++')

    return args


# ****************************************************************************************
# Main
# ****************************************************************************************

def main(argv=None):
    '''
    Entrypoint for the CLI.

    Output:
        Exits with 0 on success, 1 on failure, 130 on interrupt.
    '''
    args = handle_args(argv)
    log.debug('Entering main()')

    try:
        exit_code = args.func(args)

    except JiraCredentialsError as e:
        log.error(e.message)
        output('')
        output('ERROR: ' + e.message)
        output('')
        output('Please set the required environment variables:')
        output('  export JIRA_URL="https://yourcompany.atlassian.net"')
        output('  export JIRA_EMAIL="your.email@yourcompany.com"')
        output('  export JIRA_API_TOKEN="your_api_token_here"')
        output('')
        exit_code = 1
    except (JiraConnectionError, JiraApiError, InvalidDateError, InvalidIssueKeyError) as e:
        log.error(e.message)
        output('ERROR: ' + e.message)
        exit_code = 1
    except KeyboardInterrupt:
        output('\nOperation cancelled.')
        exit_code = 130
    except Exception as e:
        log.error(f'Unexpected error: {e}', exc_info=True)
        output(f'ERROR: {e}')
        exit_code = 1

    log.info('Operation complete.')
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
