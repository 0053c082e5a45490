"""
Logging configuration for the Recipeshare core.
"""

import logging
import sys

from recipeshare.config import settings


def setup_logging() -> logging.Logger:
    """
    Configure application logging.

    :return: Root logger for the recipeshare application
    :rtype: logging.Logger
    """
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # aiosqlite logs every statement at debug
    for noisy in ('aiosqlite', 'socketio.server', 'engineio.server'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logging.getLogger('recipeshare')


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    :param name: The module name for the logger
    :type name: str
    :return: Logger instance for the specified module
    :rtype: logging.Logger
    """
    return logging.getLogger(f'recipeshare.{name}')
