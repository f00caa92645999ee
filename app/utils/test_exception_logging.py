import logging
from typing import List
from unittest.mock import Mock

import httpx

from app.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)


class BrokenStrException(Exception):
    """An exception that breaks when __str__ is called."""

    def __str__(self):
        raise RuntimeError("Cannot convert to string!")

    def __repr__(self):
        return "BrokenStrException(cannot convert to string)"


class MockExceptionGroup(Exception):
    """Stand-in for an exception group raised out of a task group."""

    def __init__(self, message: str, exceptions: List[Exception]):
        super().__init__(message)
        self.exceptions = exceptions


class TestFormatExceptionMessage:
    def test_plain_exception(self):
        assert format_exception_message(ValueError("boom")) == "boom"

    def test_httpx_error_message_kept(self):
        request = httpx.Request("GET", "http://upstream.test/")
        error = httpx.ConnectError("All connection attempts failed", request=request)

        assert format_exception_message(error) == "All connection attempts failed"

    def test_empty_message_uses_type_name(self):
        assert format_exception_message(httpx.ReadTimeout("")) == "ReadTimeout"

    def test_exception_group_lists_sub_exceptions(self):
        group = MockExceptionGroup(
            "unhandled errors", [ValueError("one"), KeyError("two")]
        )

        assert format_exception_message(group) == (
            "unhandled errors (Sub-exceptions: ValueError: one; KeyError: 'two')"
        )

    def test_broken_str_falls_back_to_repr(self):
        assert (
            format_exception_message(BrokenStrException())
            == "BrokenStrException(cannot convert to string)"
        )

    def test_none(self):
        assert format_exception_message(None) == "None"


class TestLogExceptionWithDetails:
    def setup_method(self):
        self.logger = Mock(spec=logging.Logger)

    def test_normal_exception_logging(self):
        exception = ValueError("Normal test error")

        log_exception_with_details(self.logger, "[Relay]", exception)

        self.logger.log.assert_called_once_with(
            logging.ERROR,
            "[Relay] Exception: Normal test error",
            exc_info=exception,
        )

    def test_exception_with_custom_level(self):
        exception = ValueError("Warning level error")

        log_exception_with_details(self.logger, "[Relay]", exception, logging.WARNING)

        self.logger.log.assert_called_once_with(
            logging.WARNING,
            "[Relay] Exception: Warning level error",
            exc_info=exception,
        )

    def test_exception_group_logs_each_sub_exception(self):
        subs = [ValueError("Sub error 1"), RuntimeError("Sub error 2")]
        group = MockExceptionGroup("Multiple errors occurred", subs)

        log_exception_with_details(self.logger, "[Relay]", group)

        assert self.logger.log.call_count == 3
        first, second, third = self.logger.log.call_args_list
        assert first.args == (
            logging.ERROR,
            "[Relay] Exception with 2 sub-exceptions: Multiple errors occurred",
        )
        assert second.args == (
            logging.ERROR,
            "[Relay] Sub-exception 1: ValueError: Sub error 1",
        )
        assert second.kwargs["exc_info"] is subs[0]
        assert third.kwargs["exc_info"] is subs[1]

    def test_broken_logger_does_not_raise(self):
        self.logger.log.side_effect = [RuntimeError("handler broke"), None]

        log_exception_with_details(self.logger, "[Relay]", ValueError("x"))

        assert self.logger.log.call_args_list[-1].args == (
            logging.ERROR,
            "[Relay] Exception (logging failed)",
        )
