"""Logging setup.

Everything goes to stderr: under the stdio transport, stdout carries the
protocol stream.
"""

import logging
import sys

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level_name: str = "INFO") -> None:
    """Install a single stderr handler on the package logger."""
    level = _LOG_LEVELS.get(level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))

    package_logger = logging.getLogger("resend_uvx_mcp")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    # keep the SDK and HTTP client quiet unless debugging
    third_party_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in ("mcp", "httpx", "httpcore", "uvicorn"):
        logging.getLogger(name).setLevel(third_party_level)
