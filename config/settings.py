##########################################################################################
#
# Module: config/settings.py
#
# Description: Application settings and configuration management.
#
# Author: Cornelis Networks
#
##########################################################################################

import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables; real process environment takes precedence
load_dotenv(override=False)

# Logging config - follows jira_cli.py pattern
log = logging.getLogger(os.path.basename(sys.argv[0]))

DEFAULT_JIRA_URL = 'https://cornelisnetworks.atlassian.net'
LOG_FORMAT = '%(asctime)-15s [%(funcName)25s:%(lineno)-5s] %(levelname)-8s %(message)s'

AUTH_TYPES = ('basic', 'bearer')


@dataclass
class Settings:
    '''
    Application settings loaded from environment variables.
    '''
    # Jira settings
    jira_url: str = DEFAULT_JIRA_URL
    jira_email: Optional[str] = None
    jira_api_token: Optional[str] = None
    jira_auth_type: str = 'basic'
    jira_project: Optional[str] = None
    request_timeout_seconds: int = 30

    # Logging
    log_file: str = 'jira_cli.log'
    log_level: str = 'DEBUG'

    @classmethod
    def from_env(cls) -> 'Settings':
        '''
        Create settings from environment variables.

        Output:
            Settings instance populated from environment.
        '''
        return cls(
            # Jira
            jira_url=os.getenv('JIRA_URL', DEFAULT_JIRA_URL),
            jira_email=os.getenv('JIRA_EMAIL'),
            jira_api_token=os.getenv('JIRA_API_TOKEN'),
            jira_auth_type=os.getenv('JIRA_AUTH_TYPE', 'basic').lower(),
            jira_project=os.getenv('JIRA_PROJECT') or None,
            request_timeout_seconds=int(os.getenv('JIRA_TIMEOUT_SECONDS', '30')),

            # Logging
            log_file=os.getenv('LOG_FILE', 'jira_cli.log'),
            log_level=os.getenv('LOG_LEVEL', 'DEBUG'),
        )

    def validate(self) -> bool:
        '''
        Validate that required settings are present.

        Output:
            True if all required settings are valid.

        Raises:
            ValueError: If required settings are missing.
        '''
        errors = []

        if not self.jira_url:
            errors.append('JIRA_URL is required')
        if self.jira_auth_type not in AUTH_TYPES:
            errors.append(f'JIRA_AUTH_TYPE must be one of: {", ".join(AUTH_TYPES)}')
        # Bearer tokens carry the identity; basic auth needs the login too
        if self.jira_auth_type == 'basic' and not self.jira_email:
            errors.append('JIRA_EMAIL is required for basic auth')
        if not self.jira_api_token:
            errors.append('JIRA_API_TOKEN is required')

        if errors:
            for error in errors:
                log.error(f'Configuration error: {error}')
            raise ValueError(f'Configuration errors: {", ".join(errors)}')

        return True

    def to_dict(self) -> Dict[str, Any]:
        '''Convert settings to dictionary (masking sensitive values).'''
        return {
            'jira_url': self.jira_url,
            'jira_email': self.jira_email,
            'jira_api_token': '***' if self.jira_api_token else None,
            'jira_auth_type': self.jira_auth_type,
            'jira_project': self.jira_project,
            'request_timeout_seconds': self.request_timeout_seconds,
            'log_file': self.log_file,
            'log_level': self.log_level,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    '''
    Get the global settings instance.

    Output:
        Settings instance (creates from environment if not exists).
    '''
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    '''Drop the cached settings so the next get_settings() re-reads the environment.'''
    global _settings
    _settings = None


def load_env_file(path: str) -> bool:
    '''
    Load an alternate dotenv file and drop cached settings.

    Input:
        path: Path to the dotenv file.

    Output:
        True if the file was found and loaded.
    '''
    loaded = load_dotenv(path, override=True)
    log.debug(f'load_env_file(path={path}) -> {loaded}')
    reset_settings()
    return loaded


def configure_logging(settings: Optional[Settings] = None, console_level: int = logging.INFO) -> logging.FileHandler:
    '''
    Configure the CLI logger based on settings.

    Input:
        settings: Optional settings instance (uses global if not provided).
        console_level: Level for the stdout handler (from -v / -q).

    Output:
        The file handler, so user-facing output can be mirrored to the log file.
    '''
    settings = settings or get_settings()

    log.setLevel(getattr(logging, settings.log_level.upper(), logging.DEBUG))
    formatter = logging.Formatter(LOG_FORMAT)

    # File handler
    fh = logging.FileHandler(settings.log_file, mode='w')
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    log.addHandler(fh)

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(console_level)
    ch.setFormatter(formatter)
    log.addHandler(ch)

    log.debug(f'Logging configured: file={settings.log_file}, level={settings.log_level}')
    return fh
