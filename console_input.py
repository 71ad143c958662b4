from __future__ import annotations

from typing import Any, Callable, Optional

from base_classes import LineReader
from config_manager import ConfigManager
from prompts import Input, Password, Selection
from utils_handler import UtilsHandler


class ConsoleInput:
    """
    Entry point for console prompts.

        console = ConsoleInput()
        name = console.input().message("Enter your name: ").get_input()
        age = console.input().message("Enter your age [19]: ").default("19").get_parsed_input(int)
        color = console.selection().message("Choose a color").options(["Red", "Green"]).get_selection()
        secret = console.password().message("Enter your password: ").get_password()

    The readers, editor and output streams can be swapped for scripted input
    and captured output; a reader given without a masked reader is used for
    password prompts as well.
    """

    def __init__(
            self,
            config: Optional[Any] = None,
            *,
            reader: Optional[LineReader] = None,
            masked_reader: Optional[LineReader] = None,
            editor: Optional[Callable[[str], str]] = None,
            stdout: Optional[Any] = None,
            stderr: Optional[Any] = None
    ) -> None:
        if config is None:
            config = ConfigManager().create_session_config()
        self.config = config
        self.utils = UtilsHandler(config, reader=reader, masked_reader=masked_reader,
                                  editor=editor, stdout=stdout, stderr=stderr)
        self.utils.logger.settings({
            'prompts': self._section('PROMPTS'),
            'editor': self._section('EDITOR'),
        })

    def _section(self, name: str) -> dict:
        getter = getattr(self.config, 'get_all_options_from_section', None)
        return getter(name) if getter else {}

    def input(self) -> Input:
        """Creates a new Input builder for text input."""
        return Input(self.utils)

    def selection(self) -> Selection:
        """Creates a new Selection builder for choosing from a list of options."""
        return Selection(self.utils)

    def password(self) -> Password:
        """Creates a new Password builder for masked input."""
        return Password(self.utils)

    def edit_in_external_editor(self, text: str) -> str:
        """Opens the configured editor on `text` and returns the edited content."""
        return self.utils.editor(text)
