"""
Gateway configuration from environment variables, and logging setup.
"""

import logging.config
import os
from typing import Optional


DEFAULT_MAX_ROWS = 100
DEFAULT_MAX_POOL_SIZE = 10


class GatewayConfig:
    """Gateway configuration from environment variables."""

    def __init__(self):
        self.data_dir = os.getenv("DBGATEWAY_DATA_DIR", os.getcwd())
        # Passphrase for Fernet encryption of stored connection strings
        self.encryption_key: Optional[str] = os.getenv("DBGATEWAY_ENCRYPTION_KEY") or None
        self.log_level = os.getenv("DBGATEWAY_LOG_LEVEL", "INFO").upper()
        self.max_pool_size = self._get_int("DBGATEWAY_MAX_POOL_SIZE", DEFAULT_MAX_POOL_SIZE)
        self.default_max_rows = self._get_int("DBGATEWAY_DEFAULT_MAX_ROWS", DEFAULT_MAX_ROWS)

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            logging.getLogger(__name__).warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
            return default

    def __repr__(self) -> str:
        return (
            f"GatewayConfig(data_dir={self.data_dir}, "
            f"encrypted_store={self.encryption_key is not None}, "
            f"max_pool_size={self.max_pool_size}, log_level={self.log_level})"
        )


LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        # stdout carries command output, so logs go to stderr
        'console': {
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stderr',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'dbgateway': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'dbgateway.adapters': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'dbgateway.migration': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'dbgateway.connections': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}


def configure_logging(level: Optional[str] = None) -> None:
    """
    Apply the LOGGING dictConfig, optionally overriding every gateway logger's level.

    Args:
        level: Log level name (DEBUG, INFO, ...). Defaults to DBGATEWAY_LOG_LEVEL.
    """
    level = (level or GatewayConfig().log_level).upper()
    config = {**LOGGING, 'loggers': {
        name: {**settings, 'level': level} for name, settings in LOGGING['loggers'].items()
    }}
    logging.config.dictConfig(config)
