"""
Centralized logging configuration for the context orchestrator service.

This module provides a function to set up application-wide logging,
including formatting, log levels, and handlers for console and file output.
Request-scoped code obtains a `LoggerAdapter` via `get_logger()` so that every
record carries the interaction id and the pipeline stage that produced it.
"""

import logging
import logging.handlers # Required for RotatingFileHandler
import sys # To ensure we can always output to stdout for console
import json
from typing import Any, Dict, Optional

class StructuredLogFormatter(logging.Formatter):
    """
    Custom formatter that renders each log record as one JSON line.

    Features:
    - Includes interaction_id if present on the record
    - Includes stage (resolver, fetch, context_manager, ...) if present on the record
    - Merges any `extra_fields` mapping passed through `extra=`
    - Preserves standard log fields (timestamp, level, logger name, message)
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        if hasattr(record, 'interaction_id'):
            log_data['interaction_id'] = record.interaction_id

        if hasattr(record, 'stage'):
            log_data['stage'] = record.stage

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(interaction_id)s] - [%(stage)s] - %(message)s'
DEFAULT_LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def get_logger(name: str, **context: Any) -> logging.LoggerAdapter:
    """
    Get a logger adapter that stamps records with request context.

    Args:
        name (str): Logger name (usually __name__)
        **context: Values overriding the defaults, typically `interaction_id` and `stage`.

    Returns:
        logging.LoggerAdapter: Adapter whose `extra` always contains interaction_id and stage.

    A fresh adapter is returned on every call, so concurrent requests never share
    (or mutate) each other's context.
    """
    extra: Dict[str, Any] = {
        'interaction_id': 'no_id',
        'stage': 'no_stage'
    }
    extra.update(context)
    return logging.LoggerAdapter(logging.getLogger(name), extra)

def setup_app_logging(config: Optional[dict] = None, default_level=logging.INFO) -> None:
    """
    Set up logging for the entire application.

    This function configures the root logger with handlers for console
    and file output. Log levels and file paths can be specified via
    the optional config dictionary.

    Args:
        config (dict, optional): A dictionary containing logging configurations.
                                Expected keys:
                                - 'level': String representation of log level (e.g., "DEBUG", "INFO").
                                - 'file_path': Path to the log file; empty or None disables file logging.
                                - 'max_bytes': Max size of the log file before rotation.
                                - 'backup_count': Number of backup log files to keep.
                                - 'format': Custom log format string.
                                - 'date_format': Custom log date format string.
        default_level (int, optional): The default logging level if not specified
                                     in the config. Defaults to logging.INFO.
    """
    if config is None:
        config = {}

    log_level_str = str(config.get('level', logging.getLevelName(default_level))).upper()
    numeric_log_level = getattr(logging, log_level_str, default_level)
    if not isinstance(numeric_log_level, int):
        print(f"Warning: Invalid log level string '{log_level_str}'. Using default level {logging.getLevelName(default_level)}.", file=sys.stderr)
        numeric_log_level = default_level

    log_format = config.get('format', DEFAULT_LOG_FORMAT)
    log_date_format = config.get('date_format', DEFAULT_LOG_DATE_FORMAT)

    formatter = StructuredLogFormatter(log_format, datefmt=log_date_format)

    # Configuring the root logger lets every module-level logging.getLogger(__name__) inherit it.
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_log_level)

    if root_logger.hasHandlers():
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_file_path = config.get('file_path')
    if log_file_path:
        try:
            max_bytes = int(config.get('max_bytes', 5*1024*1024))  # 5 MB
            backup_count = int(config.get('backup_count', 3))

            file_handler = logging.handlers.RotatingFileHandler(
                log_file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"Error setting up file logging to {log_file_path}: {e}. File logging will be disabled.", file=sys.stderr)

    initial_logger = get_logger("LoggingConfig")
    initial_logger.info("Application logging setup complete. Level: %s", log_level_str)
