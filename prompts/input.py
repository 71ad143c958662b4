from __future__ import annotations

from typing import Any, List, Optional

from base_classes import ReadError, EditorError, EndOfInput
from prompts.base import PromptBuilder


class Input(PromptBuilder):
    """
    Text input from the user, single-line by default.

    Single-line prompts keep the cursor on the message line. Multiline prompts
    read until end of input (Ctrl+D) or, with the editor enabled, until a line
    holding only the editor token hands the text to the external editor.
    """

    kind = 'input'

    def default(self, value: Any) -> 'Input':
        """Sets the value returned when the user enters nothing."""
        return self._replace(default=str(value))

    def disable_tips(self) -> 'Input':
        return self._replace(show_tips=False)

    def multiline(self) -> 'Input':
        return self._replace(multiline=True)

    def editor(self, enabled: bool = True) -> 'Input':
        """Toggles the external editor escape for multiline input."""
        return self._replace(editor=bool(enabled))

    # Acquisition --------------------------------------------------------
    def get_input(self) -> str:
        """Gets the input from the user as a string."""
        return self._loop().run(self._acquire, retry_on=(), meta=self._meta())

    def get_parsed_input(self, target: Any = str) -> Any:
        """
        Gets the input and converts it with `target` (a type, a callable taking
        a string, or an InputValidator), asking again until conversion succeeds.
        """
        loop = self._loop()

        def attempt() -> Any:
            return self.utils.input.parse(self._acquire(retrying=loop.attempts > 1), target)

        meta = self._meta()
        meta['target'] = getattr(target, '__name__', type(target).__name__)
        return loop.run(attempt, meta=meta)

    def get_int(self) -> int:
        return self.get_parsed_input(int)

    def get_float(self) -> float:
        return self.get_parsed_input(float)

    def get_bool(self) -> bool:
        return self.get_parsed_input(bool)

    # Internals ----------------------------------------------------------
    def _meta(self) -> dict:
        return {'multiline': self.config.multiline, 'has_default': self.config.default is not None}

    def _acquire(self, retrying: bool = False) -> str:
        if self.config.multiline:
            return self._read_multiline(retrying)
        return self._read_single_line()

    def _with_default(self, text: str) -> str:
        if not text and self.config.default is not None:
            return self.config.default
        return text

    def _read_single_line(self) -> str:
        self.utils.output.prompt(self.config.message)
        line = self.utils.input.read_required_line()
        return self._with_default(line.strip())

    def _tip_line(self) -> str:
        tip = self._setting('PROMPTS', 'multiline_tip', '(Press Enter, then Ctrl+D to send)')
        if self.config.editor:
            token = self._setting('EDITOR', 'token', '@e')
            tip += self._setting(
                'PROMPTS', 'editor_tip',
                ' (In a blank line type {token}, then press Enter to edit in external editor)'
            ).format(token=token)
        return tip

    def _read_multiline(self, retrying: bool = False) -> str:
        """
        On a retry, end of input before any line means the stream is closed,
        so EndOfInput is raised instead of handing back an empty buffer.
        """
        out = self.utils.output
        out.prompt(self.config.message, end='\n')
        if self.config.show_tips:
            out.tip(self._tip_line())

        token = self._setting('EDITOR', 'token', '@e')
        lines: List[str] = []
        edited: Optional[str] = None
        while True:
            try:
                line = self.utils.input.read_line()
            except ReadError as e:
                e.partial = '\n'.join(lines)
                raise
            if line is None:
                if retrying and not lines:
                    raise EndOfInput()
                break
            if self.config.editor and line.strip() == token:
                try:
                    edited = self.utils.editor(''.join(f'{l}\n' for l in lines))
                except EditorError as e:
                    out.error(f'Error using external editor: {e.user_message}')
                    continue
                break
            lines.append(line)

        text = edited if edited is not None else '\n'.join(lines)
        return self._with_default(text.rstrip())
