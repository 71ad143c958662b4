# input_utils.py
from __future__ import annotations

import getpass
import re
import sys
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Any, Callable, Dict, Iterable, Iterator, TextIO, Union

from base_classes import LineReader, ReadError, EndOfInput, ParseError

_ORDINAL = re.compile(r'\+?[0-9]+')


@dataclass
class InputValidator:
    """
    Container for input validation rules.
    - type_check: The expected type (callable or type) to convert the raw input
    - constraints: Optional custom validation function that returns True/False
    - error_message: Custom error message if validation fails
    """
    type_check: Callable[[str], Any]
    constraints: Optional[Callable[[Any], bool]] = None
    error_message: Optional[str] = None


def _strip_newline(line: str) -> str:
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith('\n'):
        return line[:-1]
    return line


class StdinLineReader(LineReader):
    """Reads lines from a text stream (stdin unless told otherwise)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Looked up per read; sys.stdin may be swapped after construction
        return self._stream if self._stream is not None else sys.stdin

    def read_line(self) -> Optional[str]:
        try:
            line = self.stream.readline()
        except (OSError, ValueError) as e:
            # ValueError: I/O operation on closed file
            raise ReadError(f"Error reading input: {e}", cause=e) from e
        if line == '':
            return None
        return _strip_newline(line)


class GetpassReader(StdinLineReader):
    """Masked reader backed by getpass; falls back to plain reads when stdin is not a terminal."""

    def read_secret(self) -> Optional[str]:
        stream = self.stream
        if not (hasattr(stream, 'isatty') and stream.isatty()):
            return self.read_line()
        try:
            return getpass.getpass('')
        except EOFError:
            return None
        except OSError as e:
            raise ReadError(f"Error reading password: {e}", cause=e) from e


class ScriptedLineReader(LineReader):
    """
    Feeds a fixed sequence of lines, for tests and non-interactive runs.
    Exception instances in the sequence are raised when reached (OSErrors
    become ReadError). A None entry, or exhausting the sequence, signals end
    of stream; a terminal keeps reading after Ctrl+D the same way.
    """

    def __init__(self, lines: Iterable[Union[str, BaseException, None]]) -> None:
        self._lines: Iterator[Union[str, BaseException, None]] = iter(lines)
        self.consumed = 0

    def read_line(self) -> Optional[str]:
        try:
            item = next(self._lines)
        except StopIteration:
            return None
        self.consumed += 1
        if item is None:
            return None
        if isinstance(item, ReadError):
            raise item
        if isinstance(item, OSError):
            raise ReadError(f"Error reading input: {item}", cause=item) from item
        if isinstance(item, BaseException):
            raise item
        return _strip_newline(item)


def convert_to_bool(value: str) -> bool:
    """
    Convert a string to boolean, supporting yes/no, y/n, true/false, on/off, 1/0.
    Raises ValueError if it doesn't match known patterns.
    """
    val_lower = value.strip().lower()
    if val_lower in ('yes', 'y', 'true', 'on', '1'):
        return True
    elif val_lower in ('no', 'n', 'false', 'off', '0'):
        return False
    else:
        raise ValueError("Invalid boolean input")


def config_flag(value: Any) -> bool:
    """Read a configuration switch; strings go through convert_to_bool."""
    if isinstance(value, (bool, int)):
        return bool(value)
    if value is None or not str(value).strip():
        return False
    return convert_to_bool(str(value))


def _to_decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise ValueError(str(e)) from e


def parse_ordinal(value: str) -> int:
    """Parse a positive integer choice; a leading '+' is accepted."""
    text = value.strip()
    if not _ORDINAL.fullmatch(text):
        raise ValueError(f"Not a positive integer: {value!r}")
    return int(text)


# Default validators for common types
VALIDATORS: Dict[Any, InputValidator] = {
    str: InputValidator(type_check=str),
    int: InputValidator(
        type_check=int,
        error_message="Please enter a valid integer"
    ),
    float: InputValidator(
        type_check=float,
        error_message="Please enter a valid number"
    ),
    Decimal: InputValidator(
        type_check=_to_decimal,
        error_message="Please enter a valid number"
    ),
    bool: InputValidator(
        type_check=convert_to_bool,
        error_message="Please enter yes/no or true/false"
    ),
}


def resolve_validator(target: Any) -> InputValidator:
    """Map a target type, callable or validator to an InputValidator."""
    if isinstance(target, InputValidator):
        return target
    if target in VALIDATORS:
        return VALIDATORS[target]
    if callable(target):
        return InputValidator(type_check=target)
    raise TypeError(f"Cannot parse input into {target!r}")


def parse_value(raw: str, target: Any, error_message: Optional[str] = None) -> Any:
    """
    Convert raw text with the validator for `target`.
    Raises ParseError when conversion fails or constraints reject the value.
    """
    validator = resolve_validator(target)
    message = validator.error_message or error_message or "Invalid input."
    try:
        value = validator.type_check(raw)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise ParseError(message, raw=raw, target=target) from e
    if validator.constraints and not validator.constraints(value):
        raise ParseError(message, raw=raw, target=target)
    return value


class InputHandler:
    """
    Provides the line sources used by the prompt loops: a plain reader for
    visible input and a masked reader for secrets, plus parsing helpers.
    """

    def __init__(
            self,
            config: Any,
            output_handler: Optional[Any] = None,
            reader: Optional[LineReader] = None,
            masked_reader: Optional[LineReader] = None
    ) -> None:
        """
        Initialize input handler with user configuration.
        When only `reader` is given it also serves masked reads.
        """
        self.config = config
        self.output = output_handler
        self.reader: LineReader = reader or StdinLineReader()
        if masked_reader is not None:
            self.masked_reader: LineReader = masked_reader
        elif reader is not None:
            self.masked_reader = reader
        else:
            self.masked_reader = GetpassReader()

    def read_line(self) -> Optional[str]:
        """Read one visible line; None at end of stream."""
        return self.reader.read_line()

    def read_required_line(self) -> str:
        """Read one visible line, treating end of stream as an error."""
        line = self.read_line()
        if line is None:
            raise EndOfInput()
        return line

    def read_secret(self) -> str:
        secret = self.masked_reader.read_secret()
        if secret is None:
            raise EndOfInput()
        return secret

    def parse(self, raw: str, target: Any) -> Any:
        fallback = self.config.get_option('PROMPTS', 'invalid_input_message',
                                          fallback='Invalid input. Please try again.')
        return parse_value(raw, target, error_message=fallback)
