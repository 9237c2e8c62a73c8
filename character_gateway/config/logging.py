"""
Logging configuration for the character gateway.

This module provides centralized logging configuration with text or JSON
console output and a small structured logger for request and upstream events.
"""

import logging
import logging.config
import sys
from typing import Dict, Any, Optional


def get_logging_config(
    log_level: str = "INFO",
    log_format: str = "text",
    enable_access_log: bool = True
) -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        enable_access_log: Whether to enable HTTP access logging

    Returns:
        Logging configuration dictionary
    """
    formatters = {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(module)s %(lineno)d %(message)s"
        }
    }

    formatter_name = "json" if log_format == "json" else "default"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": formatter_name,
            "stream": sys.stdout
        }
    }

    handler_names = list(handlers.keys())
    loggers = {
        "": {
            "level": log_level,
            "handlers": handler_names,
        },
        "uvicorn": {
            "level": log_level,
            "handlers": handler_names,
            "propagate": False
        },
        "uvicorn.error": {
            "level": log_level,
            "handlers": handler_names,
            "propagate": False
        },
        "character_gateway": {
            "level": log_level,
            "handlers": handler_names,
            "propagate": False
        },
        # httpx logs full request URLs at INFO, which would include a
        # credential sent as a query parameter.
        "httpx": {
            "level": "WARNING",
            "handlers": handler_names,
            "propagate": False
        }
    }

    loggers["uvicorn.access"] = {
        "level": "INFO" if enable_access_log else "WARNING",
        "handlers": handler_names,
        "propagate": False
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": loggers
    }


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    enable_access_log: bool = True
) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        enable_access_log: Whether to enable HTTP access logging
    """
    config = get_logging_config(
        log_level=log_level,
        log_format=log_format,
        enable_access_log=enable_access_log
    )

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)


class StructuredLogger:
    """
    Structured logger for consistent log message formatting.

    Fields are passed through ``extra`` so the JSON formatter emits them as
    top-level keys.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        response_time: float,
        client_ip: Optional[str] = None,
        **kwargs
    ):
        """Log an inbound HTTP request.

        Args:
            method: HTTP method
            path: Request path
            status_code: Response status code
            response_time: Response time in milliseconds
            client_ip: Client IP address
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "http_request",
            "method": method,
            "path": path,
            "status_code": status_code,
            "response_time_ms": round(response_time, 2),
        }

        if client_ip:
            log_data["client_ip"] = client_ip

        log_data.update(kwargs)

        if status_code >= 500:
            self.logger.error("HTTP request", extra=log_data)
        elif status_code >= 400:
            self.logger.warning("HTTP request", extra=log_data)
        else:
            self.logger.info("HTTP request", extra=log_data)

    def log_upstream_call(
        self,
        endpoint: str,
        status_code: Optional[int],
        response_time: float,
        success: bool,
        error: Optional[str] = None,
        **kwargs
    ):
        """Log one outbound call to the upstream API.

        ``endpoint`` must be the URL without credential query parameters.
        """
        log_data = {
            "event": "upstream_call",
            "endpoint": endpoint,
            "method": "GET",
            "status_code": status_code,
            "response_time_ms": round(response_time, 2),
            "success": success,
        }

        if error:
            log_data["error"] = error

        log_data.update(kwargs)

        if success:
            self.logger.info("Upstream call", extra=log_data)
        else:
            self.logger.error("Upstream call failed", extra=log_data)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, extra=kwargs)
