"""
Helpers for turning relay failures into log records and caller-facing messages.

Both helpers tolerate exception groups (as raised out of anyio task groups) and
exceptions whose ``__str__`` is broken, and neither of them ever raises.
"""

import logging


def _safe_str(obj) -> str:
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def _sub_exceptions(exception) -> list:
    try:
        return list(getattr(exception, "exceptions", None) or [])
    except Exception:
        return []


def format_exception_message(exception: Exception) -> str:
    """
    Render an exception as a single line for an error response body.

    httpx raises several transport errors with an empty message (a bare
    ``ReadTimeout()`` for instance); those fall back to the exception type name
    so the caller never receives an empty ``error`` field.

    Args:
        exception: The exception to format

    Returns:
        A non-empty description of the exception
    """
    if exception is None:
        return "None"
    try:
        message = _safe_str(exception).strip() or type(exception).__name__
        subs = _sub_exceptions(exception)
        if subs:
            details = "; ".join(
                f"{type(sub).__name__}: {_safe_str(sub)}" for sub in subs
            )
            return f"{message} (Sub-exceptions: {details})"
        return message
    except Exception:
        return "<exception (formatting failed)>"


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: Exception,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with its traceback, one record per sub-exception for groups.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g., "[Relay]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    try:
        subs = _sub_exceptions(exception)
        if not subs:
            logger.log(
                level,
                f"{prefix} Exception: {format_exception_message(exception)}",
                exc_info=exception if exception is not None else False,
            )
            return

        logger.log(
            level,
            f"{prefix} Exception with {len(subs)} sub-exceptions: {_safe_str(exception)}",
        )
        for i, sub_exc in enumerate(subs):
            logger.log(
                level,
                f"{prefix} Sub-exception {i+1}: {type(sub_exc).__name__}: {_safe_str(sub_exc)}",
                exc_info=sub_exc,
            )
    except Exception:
        try:
            logger.log(logging.ERROR, f"{prefix} Exception (logging failed)")
        except Exception:
            pass
