from __future__ import annotations

import sys
import os
import platform
import ctypes
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, List, TextIO

from utils.input_utils import config_flag


class OutputLevel(Enum):
    """Message levels, lowest first."""
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


# Levels at or above this go to the error channel
_ERROR_CHANNEL_LEVEL = OutputLevel.WARNING


@dataclass
class Style:
    """
    Styling for one piece of text. Colors are ANSI names ("red", "gray")
    or "#RRGGBB" hex codes.
    """
    fg: Optional[str] = None
    bg: Optional[str] = None
    bold: bool = False
    dim: bool = False


class ColorSystem:
    """Builds ANSI escape sequences for a Style."""

    COLORS: Dict[str, int] = {
        'black': 30, 'red': 31, 'green': 32, 'yellow': 33,
        'blue': 34, 'magenta': 35, 'cyan': 36, 'white': 37,
        'gray': 90,
    }

    STYLES: Dict[str, int] = {'bold': 1, 'dim': 2}

    @staticmethod
    def enable_ansi_on_windows() -> bool:
        """Turns on virtual terminal processing for Windows consoles. Elsewhere a no-op."""
        if platform.system() != 'Windows':
            return True
        try:
            kernel32 = ctypes.windll.kernel32
            # processed output | wrap at EOL | virtual terminal processing
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 0x0001 | 0x0002 | 0x0004)
            return True
        except (AttributeError, OSError):
            return False

    @classmethod
    def _color_code(cls, color: str, background: bool) -> Optional[str]:
        if color.startswith('#'):
            hex_digits = color[1:]
            r, g, b = (int(hex_digits[i:i + 2], 16) for i in (0, 2, 4))
            return f"{48 if background else 38};2;{r};{g};{b}"
        code = cls.COLORS.get(color.lower())
        if code is None:
            return None
        # Background codes sit 10 above the foreground ones
        return str(code + 10 if background else code)

    @classmethod
    def style_text(cls, text: str, style: Style) -> str:
        """Wrap text in the escape codes for `style`; plain text when nothing applies."""
        codes: List[str] = []
        for color, background in ((style.fg, False), (style.bg, True)):
            code = cls._color_code(color, background) if color else None
            if code:
                codes.append(code)
        codes.extend(str(code) for name, code in cls.STYLES.items() if getattr(style, name))
        if not codes:
            return text
        return f"\033[{';'.join(codes)}m{text}\033[0m"


class OutputHandler:
    """
    Writes prompt text to the output stream and diagnostics to the error
    stream. Informational messages are filtered by the configured level.
    """

    def __init__(self, config: Any) -> None:
        """
        Reads [DEFAULT] colors (bool) and [DEFAULT] output_level (a level name).
        """
        self.config = config
        self._stream: Optional[TextIO] = None
        self._error_stream: Optional[TextIO] = None

        self._color_enabled = (
                config_flag(config.get_option('DEFAULT', 'colors', fallback=True))
                and self._supports_color()
        )
        if self._color_enabled:
            ColorSystem.enable_ansi_on_windows()

        self.level_styles: Dict[OutputLevel, Style] = {
            OutputLevel.DEBUG: Style(fg='gray', dim=True),
            OutputLevel.INFO: Style(),
            OutputLevel.WARNING: Style(fg='yellow'),
            OutputLevel.ERROR: Style(fg='red', bold=True),
        }

        level_name = str(config.get_option('DEFAULT', 'output_level', fallback='INFO'))
        self.level = OutputLevel.__members__.get(level_name.upper())
        if self.level is None:
            self.level = OutputLevel.INFO
            self.error(f"Invalid output level '{level_name}', using INFO")

    @staticmethod
    def _supports_color() -> bool:
        """Color needs a terminal on stdout, a known TERM, and no NO_COLOR."""
        if os.environ.get('NO_COLOR'):
            return False
        isatty = getattr(sys.stdout, 'isatty', None)
        if isatty is None or not isatty():
            return False
        return os.environ.get('TERM', '').lower() not in ('', 'dumb', 'unknown')

    # Looked up per write; sys.stdout and sys.stderr may be swapped after construction
    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream if self._error_stream is not None else sys.stderr

    def set_stream(self, stream: TextIO) -> None:
        self._stream = stream

    def set_error_stream(self, stream: TextIO) -> None:
        self._error_stream = stream

    def style_text(self, text: str, **attrs: Any) -> str:
        """Style text with Style attributes given as keywords, when color is on."""
        if not self._color_enabled:
            return text
        return ColorSystem.style_text(text, Style(**attrs))

    def prompt(self, text: Any, end: str = '') -> None:
        """
        Prompt text always goes to the output stream, whatever the level,
        and is flushed so the cursor waits on the same line.
        """
        print(str(text), end=end, file=self.stream, flush=True)

    def tip(self, message: Any) -> None:
        """A dimmed hint line under a prompt."""
        self.prompt(self.style_text(str(message), dim=True), end='\n')

    def write(
            self,
            message: Any = '',
            level: OutputLevel = OutputLevel.INFO,
            style: Optional[Style] = None,
            prefix: Optional[str] = None,
            end: str = '\n',
            flush: bool = False
    ) -> None:
        """
        Write a message at `level`. Below the configured level it is dropped;
        WARNING and above go to the error stream.

        Args:
            message: text to write
            level: message level, INFO unless given
            style: overrides the level's style
            prefix: written as "prefix: message"
            end: line terminator
            flush: flush the target stream afterwards
        """
        if level.value < self.level.value:
            return

        text = str(message)
        if prefix:
            text = f"{prefix}: {text}"
        if self._color_enabled:
            text = ColorSystem.style_text(text, style or self.level_styles[level])

        target = self.error_stream if level.value >= _ERROR_CHANNEL_LEVEL.value else self.stream
        print(text, end=end, file=target, flush=flush)

    def debug(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.DEBUG, **kwargs)

    def info(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.INFO, **kwargs)

    def warning(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.WARNING, **kwargs)

    def error(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.ERROR, **kwargs)
