"""
Abstract base classes and error types for console-input components.

These classes define the interfaces that line sources must implement and the
exceptions raised by the prompt loops when a value cannot be produced.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Any


class LineReader(ABC):
    """
    Abstract source of raw input lines
    """

    @abstractmethod
    def read_line(self) -> Optional[str]:
        """
        Read one line without its trailing newline.
        Returns None at end of stream, raises ReadError on I/O failure.
        """
        pass

    def read_secret(self) -> Optional[str]:
        """Read one line without echo. Sources that cannot mask just read a line."""
        return self.read_line()


class PromptError(Exception):
    def __init__(self, user_message: str, *, recoverable: bool = False):
        super().__init__(user_message)
        self.user_message = user_message
        self.recoverable = recoverable


class ReadError(PromptError):
    """The underlying stream failed. `partial` holds any text accumulated before the failure."""

    def __init__(self, user_message: str, *, partial: str = '', cause: Optional[BaseException] = None):
        super().__init__(user_message)
        self.partial = partial
        self.cause = cause


class EndOfInput(ReadError):
    def __init__(self, user_message: str = 'Input stream closed', *, partial: str = ''):
        super().__init__(user_message, partial=partial)


class ParseError(PromptError, ValueError):
    def __init__(self, user_message: str, *, raw: str = '', target: Any = None):
        super().__init__(user_message, recoverable=True)
        self.raw = raw
        self.target = target


class OutOfRangeSelection(ParseError):
    def __init__(self, user_message: str, *, choice: int, count: int):
        super().__init__(user_message, raw=str(choice), target=int)
        self.choice = choice
        self.count = count


class EditorError(PromptError):
    def __init__(self, user_message: str, *, returncode: Optional[int] = None):
        super().__init__(user_message, recoverable=True)
        self.returncode = returncode


class RetryLimitExceeded(PromptError):
    def __init__(self, attempts: int, last_error: Optional[PromptError] = None):
        super().__init__(f'No valid input after {attempts} attempt(s)')
        self.attempts = attempts
        self.last_error = last_error


class PromptCancelled(PromptError):
    def __init__(self, reason: Optional[str] = None):
        super().__init__(f'Prompt cancelled: {reason}' if reason else 'Prompt cancelled')
        self.reason = reason


class EmptyOptionsError(PromptError, ValueError):
    def __init__(self, user_message: str = 'Selection requires at least one option'):
        super().__init__(user_message)
