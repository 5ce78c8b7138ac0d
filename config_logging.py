#!/usr/bin/env python3
"""
DeepDiff Configuration & Logging Module
=======================================
Centralized configuration, structured logging, and error types shared by
the deep_diff package, its HTTP blueprint and its command line.

Version: 1.0.0
"""

import os
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_TIMEOUT_SECONDS = 1.0       # Diff budget per revision pair
DEFAULT_EDIT_COST = 4               # diff-match-patch efficiency cleanup cost
DEFAULT_TAG_NAME = "ins"
DEFAULT_CLASS_NAME = "deep-diff"
DEFAULT_MAX_STYLE_DEPTH = 5
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                # Number of log backup files to keep

__version__ = "1.0.0"
VERSION = __version__
APP_NAME = "DeepDiff"

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class DeepDiffConfig:
    """Defaults for computing and rendering deep diffs."""

    # Revision handling
    skip_empty: bool = True
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    edit_cost: int = DEFAULT_EDIT_COST

    # Rendering
    tag_name: str = DEFAULT_TAG_NAME
    class_name: str = DEFAULT_CLASS_NAME
    strict_nesting: bool = False
    max_style_depth: int = DEFAULT_MAX_STYLE_DEPTH

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # Options: json, text
    log_to_console: bool = True
    log_to_file: bool = False
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    def __post_init__(self):
        """Create the log directory only when file logging is on."""
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> 'DeepDiffConfig':
        """Load configuration from DEEPDIFF_* environment variables."""
        return cls(
            skip_empty=_env_bool('DEEPDIFF_SKIP_EMPTY', True),
            timeout=float(os.environ.get('DEEPDIFF_TIMEOUT', str(DEFAULT_TIMEOUT_SECONDS))),
            edit_cost=int(os.environ.get('DEEPDIFF_EDIT_COST', str(DEFAULT_EDIT_COST))),
            tag_name=os.environ.get('DEEPDIFF_TAG_NAME', DEFAULT_TAG_NAME),
            class_name=os.environ.get('DEEPDIFF_CLASS_NAME', DEFAULT_CLASS_NAME),
            strict_nesting=_env_bool('DEEPDIFF_STRICT_NESTING', False),
            max_style_depth=int(os.environ.get('DEEPDIFF_MAX_STYLE_DEPTH',
                                               str(DEFAULT_MAX_STYLE_DEPTH))),
            log_level=os.environ.get('DEEPDIFF_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('DEEPDIFF_LOG_FORMAT', 'text'),
            log_to_file=_env_bool('DEEPDIFF_LOG_TO_FILE', False),
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.timeout < 0:
            errors.append("timeout must be zero (unbounded) or positive")

        if self.edit_cost < 0:
            errors.append("edit_cost must not be negative")

        if not self.tag_name or not self.tag_name.isalnum():
            errors.append(f"Invalid tag_name: {self.tag_name!r}")

        if self.max_style_depth < 1:
            errors.append("max_style_depth must be at least 1")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if not isinstance(getattr(logging, self.log_level.upper(), None), int):
            errors.append(f"Invalid log_level: {self.log_level}")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[DeepDiffConfig] = None

def get_config() -> DeepDiffConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = DeepDiffConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[DeepDiffConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper(), logging.INFO))
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # Rotating file handler keeps the log directory bounded
        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _build_log_record(self, level: str, message: str, **kwargs) -> Dict[str, Any]:
        """Build a structured log record."""
        return {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level,
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **kwargs
        }

    def _render(self, level: str, message: str, **kwargs) -> str:
        if self.config.log_format == 'json':
            return json.dumps(self._build_log_record(level, message, **kwargs), default=str)
        return message

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._render('DEBUG', message, **kwargs), extra=kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._render('INFO', message, **kwargs), extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._render('WARNING', message, **kwargs), extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self.logger.error(self._render('ERROR', message, **kwargs), exc_info=exc_info, extra=kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.info(f"{operation} completed", operation=operation, status='completed',
                      duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    _RESERVED = frozenset((
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
        'message', 'taskName'
    ))

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, get_config())


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

class DeepDiffError(Exception):
    """Base exception for DeepDiff."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(DeepDiffError):
    """Input validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class FileError(DeepDiffError):
    """Revision file handling error."""
    def __init__(self, message: str, filename: Optional[str] = None, **kwargs):
        super().__init__(message, code="FILE_ERROR", status_code=400,
                         details={'filename': filename, **kwargs})


class ProcessingError(DeepDiffError):
    """Diff processing error."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator for standardized error handling."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except DeepDiffError:
                raise  # Re-raise our custom errors
            except FileNotFoundError as e:
                _logger.error(f"File not found: {e}")
                raise FileError(f"File not found: {e.filename or e}", filename=e.filename)
            except PermissionError as e:
                _logger.error(f"Permission denied: {e}")
                raise FileError(f"Permission denied: {e.filename or e}", filename=e.filename)
            except ValueError as e:
                _logger.error(f"Validation error: {e}", exc_info=True)
                raise ValidationError(str(e))
            except Exception as e:
                _logger.exception(f"Unexpected error in {func.__name__}: {e}")
                raise ProcessingError(f"An unexpected error occurred: {type(e).__name__}")
        return wrapper
    return decorator
