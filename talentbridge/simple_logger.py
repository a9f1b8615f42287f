"""
Simple Logger for the TalentBridge backend
A lightweight logging module without circular dependencies
"""

import os
import sys
import logging
import logging.handlers
from pathlib import Path


class SafeFormatter(logging.Formatter):
    """Formatter that safely handles Unicode encoding errors"""

    def format(self, record):
        try:
            return super().format(record)
        except UnicodeEncodeError:
            msg = record.getMessage()
            record.msg = msg.encode('utf-8', errors='replace').decode('utf-8')
            record.args = ()
            return super().format(record)


LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class SimpleLogger:
    """Named loggers under the ``talentbridge`` namespace.

    Console output is limited to warnings; everything from INFO up goes to
    rotating files in the log directory (``LOG_DIR`` or ``./logs``).
    """

    ACCESS_AREAS = ('access', 'api')
    SECURITY_AREAS = ('auth', 'security')

    def __init__(self, log_dir=None):
        self.loggers = {}
        self.handlers = {}
        self._setup_logging(log_dir)

    def _setup_logging(self, log_dir):
        base_logger = logging.getLogger('talentbridge')
        base_logger.setLevel(logging.DEBUG)
        base_logger.handlers.clear()
        base_logger.propagate = False

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(SafeFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        base_logger.addHandler(console_handler)

        try:
            directory = Path(log_dir or os.environ.get('LOG_DIR') or Path.cwd() / 'logs')
            directory.mkdir(parents=True, exist_ok=True)
            self._setup_file_handlers(directory)
        except OSError as e:
            # Read-only filesystems still get console logging
            base_logger.warning(f"File logging disabled: {e}")

    def _setup_file_handlers(self, log_dir):
        formatter = SafeFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        app_handler = logging.handlers.RotatingFileHandler(
            log_dir / 'talentbridge_app.log', maxBytes=10 * 1024 * 1024, backupCount=5, encoding='utf-8'
        )
        app_handler.setLevel(logging.DEBUG)
        app_handler.setFormatter(formatter)

        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / 'talentbridge_errors.log', maxBytes=5 * 1024 * 1024, backupCount=3, encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)

        access_handler = logging.handlers.RotatingFileHandler(
            log_dir / 'talentbridge_access.log', maxBytes=10 * 1024 * 1024, backupCount=5, encoding='utf-8'
        )
        access_handler.setLevel(logging.INFO)
        access_handler.setFormatter(formatter)

        self.handlers = {
            'app': app_handler,
            'error': error_handler,
            'access': access_handler,
        }

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger by area name"""
        if name not in self.loggers:
            logger = logging.getLogger(f'talentbridge.{name}')

            if self.handlers:
                if name in self.SECURITY_AREAS:
                    logger.addHandler(self.handlers['error'])
                elif name in self.ACCESS_AREAS:
                    logger.addHandler(self.handlers['access'])
                else:
                    logger.addHandler(self.handlers['app'])

            logger.setLevel(logging.INFO)
            self.loggers[name] = logger

        return self.loggers[name]


_simple_logger = None


def get_simple_logger():
    """Get the global simple logger instance"""
    global _simple_logger
    if _simple_logger is None:
        _simple_logger = SimpleLogger()
    return _simple_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return get_simple_logger().get_logger(name)
