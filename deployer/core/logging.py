# deployer/core/logging.py
"""
Centralized logging system for the deployer.

Provides:
- DeployerLogger: Global logging configuration
- LoggingMixin: Consistent logging behavior for classes
- Utility functions: Context logging helpers
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional
from datetime import datetime


CONTEXT_ATTRS = ('target', 'network', 'mode', 'canister', 'returncode',
                 'command', 'config_path', 'error')


class DeployerFormatter(logging.Formatter):
    def __init__(self, include_context: bool = False):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        base_msg = f"{timestamp} - {record.name} - {record.levelname} - {record.getMessage()}"

        if record.exc_info:
            base_msg = f"{base_msg}\n{self.formatException(record.exc_info)}"

        if not self.include_context:
            return base_msg

        context_parts = []
        for attr in CONTEXT_ATTRS:
            if hasattr(record, attr):
                context_parts.append(f"{attr}={getattr(record, attr)}")

        if context_parts:
            return f"{base_msg} | {' '.join(context_parts)}"

        return base_msg


LOG_FILE = 'deployer.log'
ERROR_LOG_FILE = 'deployer_errors.log'


def _console_handler(level: int, structured_format: bool) -> logging.Handler:
    # stdout carries command output (e.g. rendered arguments)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if structured_format:
        handler.setFormatter(DeployerFormatter(include_context=True))
    else:
        handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    return handler


def _file_handlers(log_dir: Path, level: int) -> List[logging.Handler]:
    """Full run log plus an errors-only log, both keeping context attributes"""
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = DeployerFormatter(include_context=True)

    run_log = logging.FileHandler(log_dir / LOG_FILE, encoding='utf-8')
    run_log.setLevel(level)
    run_log.setFormatter(formatter)

    error_log = logging.FileHandler(log_dir / ERROR_LOG_FILE, encoding='utf-8')
    error_log.setLevel(logging.ERROR)
    error_log.setFormatter(formatter)
    return [run_log, error_log]


class DeployerLogger:
    """Global logging configuration and management"""

    _configured = False

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  structured_format: bool = True) -> None:
        """
        Configure the `deployer` logger tree once per process.

        Args:
            log_dir: Directory for deployer.log and deployer_errors.log;
                no log files are written when omitted
            log_level: Level name; unknown names fall back to INFO
            console_enabled: Log to stderr
            structured_format: Append context attributes to console lines
        """
        if cls._configured:
            return

        level = getattr(logging, log_level.upper(), logging.INFO)
        root_logger = logging.getLogger('deployer')
        root_logger.setLevel(level)
        cls._close_handlers(root_logger)

        if console_enabled:
            root_logger.addHandler(_console_handler(level, structured_format))
        if log_dir is not None:
            for handler in _file_handlers(Path(log_dir), level):
                root_logger.addHandler(handler)

        cls._configured = True

    @classmethod
    def _close_handlers(cls, logger: logging.Logger) -> None:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    @classmethod
    def reset(cls) -> None:
        """Close handlers so the next configure() call takes effect"""
        cls._close_handlers(logging.getLogger('deployer'))
        cls._configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._configured:
            cls.configure()

        if not name.startswith('deployer'):
            name = f'deployer.{name}'

        return logging.getLogger(name)


# === Utility Functions ===

def get_class_logger(cls_instance) -> logging.Logger:
    module = cls_instance.__class__.__module__
    class_name = cls_instance.__class__.__name__

    if module.startswith('deployer.'):
        module = module[len('deployer.'):]

    logger_name = f"{module}.{class_name}"
    return DeployerLogger.get_logger(logger_name)


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if logger.isEnabledFor(level):
        record = logger.makeRecord(
            logger.name, level, "", 0, message, (), None
        )
        for key, value in context.items():
            setattr(record, key, value)
        logger.handle(record)


# === LoggingMixin for Classes ===

class LoggingMixin:
    """
    Mixin to add consistent logging behavior to any class.

    Provides convenient logging methods that automatically:
    - Create class-specific loggers
    - Support structured context logging
    """

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class"""
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.ERROR, message, **context)
