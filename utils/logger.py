"""
Logging setup for the Student Records admin dashboard
Configures the application-wide logger from Flask config
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = 'student_records'

class LoggerSetup:
    """Configures console and rotating file output for the app logger"""

    _initialized = False

    @classmethod
    def setup(cls, app=None):
        """
        Initialize and return the application logger.
        Handlers are attached only once; later calls only adjust the level.
        """
        logger = logging.getLogger(LOGGER_NAME)
        config = app.config if app is not None else {}

        log_level = config.get('LOG_LEVEL', 'INFO')
        numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
        logger.setLevel(numeric_level)

        if cls._initialized:
            return logger

        formatter = logging.Formatter(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if config.get('LOG_TO_CONSOLE', True):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        log_file = config.get('LOG_FILE')
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=config.get('LOG_MAX_BYTES', 10 * 1024 * 1024),
                backupCount=config.get('LOG_BACKUP_COUNT', 5),
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        cls._initialized = True
        logger.debug('Logging system initialized')
        return logger

def get_logger(name):
    """Return a child of the application logger, e.g. get_logger(__name__)"""
    return logging.getLogger(f'{LOGGER_NAME}.{name}')
