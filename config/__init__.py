##########################################################################################
#
# Module: config
#
# Description: Configuration management for the Jira CLI.
#
# Author: Cornelis Networks
#
##########################################################################################

from config.settings import (
    Settings,
    configure_logging,
    get_settings,
    load_env_file,
    reset_settings,
)

__all__ = [
    'Settings',
    'configure_logging',
    'get_settings',
    'load_env_file',
    'reset_settings',
]
