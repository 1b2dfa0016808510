"""
Logging configuration for the wavepipe client using eliot.

This module provides structured logging for the client and smoke runner
using eliot, which provides context-aware logging with structured data.
Credentials never appear in log messages; requests are logged by method
and resource path only.
"""

import eliot
import logging
import sys
from eliot import FileDestination, log_message, write_traceback
from eliot.stdlib import EliotHandler
from pathlib import Path


class HumanReadableDestination:
    """Destination that formats logs in a human-readable format."""

    def __init__(self, file):
        self.file = file

    def __call__(self, message):
        """Format and write log message."""
        # Skip eliot's own action bookkeeping
        if message.get("action_type") and not message.get("message_type"):
            return

        msg_type = message.get("message_type", "")

        if msg_type == "api_request":
            output = f"[API] {message.get('action', '')}"
            if message.get("resource"):
                output += f" {message['resource']}"
            if message.get("status_code") is not None:
                output += f" -> {message['status_code']}"
        elif msg_type == "error_occurred":
            output = f"[ERROR] {message.get('error_type', '')}: {message.get('error_message', '')}"
        elif "message" in message:
            output = message["message"]
        else:
            return

        if output and output.strip():
            self.file.write(output + "\n")
            self.file.flush()


# HTTP libraries log full request URLs, query string credentials included
QUIET_LOGGERS = ("urllib3", "requests")


def setup_logging(log_level: str = "INFO", log_file: str = None, stream=None) -> list:
    """
    Set up eliot logging for the client.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for raw JSON logs (human-readable output always goes to the stream)
        stream: Stream for human-readable output (default: stderr, keeping stdout for responses)

    Returns:
        The eliot destinations that were added
    """
    destinations = [HumanReadableDestination(stream or sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        destinations.append(FileDestination(file=open(log_file, "a")))

    eliot.add_destinations(*destinations)

    # Route stdlib logging through eliot
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.addHandler(EliotHandler())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    log_message(message_type="logging_setup", log_level=log_level, log_file=log_file or "stderr")
    return destinations


def log_api_request(action: str, **context):
    """
    Log API requests with context.

    Args:
        action: API action being performed (login, get, logout)
        **context: Additional context data (resource, status code, auth mode)
    """
    log_message(message_type="api_request", action=action, **context)


def log_error(error: Exception, **context):
    """
    Log errors with full context and traceback.

    Args:
        error: Exception that occurred
        **context: Additional context data
    """
    write_traceback(exc_info=sys.exc_info())
    log_message(message_type="error_occurred", error_message=str(error), error_type=type(error).__name__, **context)
