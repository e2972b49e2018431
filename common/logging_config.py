"""Shared logging setup for the archiver service and the CLI."""

import logging
import os
import re
import sys
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

MASK = '***MASKED***'

# key: value pairs whose value is never logged
_SECRET_KEYS = ('api[_-]?key', 'token', 'authorization', 'secret', 'wallet[_-]?json')

# private JWK members; "n" and "e" are public and stay readable
_JWK_PRIVATE_MEMBERS = ('d', 'p', 'q', 'dp', 'dq', 'qi')


def _build_patterns():
    patterns = [re.compile(r'(bearer\s+)([^\s,}\'"]+)', re.IGNORECASE)]
    patterns.extend(
        re.compile(rf'({key}["\']?\s*[:=]\s*["\']?)([^"\'}}\s,]+)', re.IGNORECASE)
        for key in _SECRET_KEYS
    )
    members = '|'.join(_JWK_PRIVATE_MEMBERS)
    patterns.append(re.compile(rf'(["\'](?:{members})["\']\s*:\s*["\'])([^"\']+)'))
    return patterns


class SensitiveDataFilter(logging.Filter):
    """
    Masks credentials and wallet key material before a record is emitted.

    Both the format string and its arguments are scrubbed, so secrets
    passed through %-style args are caught as well as f-strings.
    """

    PATTERNS = _build_patterns()

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.mask(record.msg)
        if isinstance(record.args, dict):
            record.args = {key: self.mask(value) for key, value in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(self.mask(arg) for arg in record.args)
        return True

    @classmethod
    def mask(cls, value):
        if not isinstance(value, str):
            return value
        for pattern in cls.PATTERNS:
            value = pattern.sub(rf'\1{MASK}', value)
        return value


def setup_logging(component_name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger of a component ('archiver' or 'cli').

    Args:
        component_name: Logger name for the component
        log_level: DEBUG, INFO, WARNING or ERROR; falls back to the
            LOG_LEVEL environment variable, then INFO

    Returns:
        The component logger
    """
    level_name = (log_level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    # setup_logging may run more than once per process (reload, tests)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.addFilter(SensitiveDataFilter())
        logger.addHandler(handler)
        logger.propagate = False

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
