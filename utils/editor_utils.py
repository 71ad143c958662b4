from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from typing import Any, List, Optional

from base_classes import EditorError


class ExternalEditor:
    """
    Opens the user's editor on a temporary file and returns the edited text.

    The command comes from [EDITOR].command, then $VISUAL, then $EDITOR,
    falling back to vi. Instances are plain callables (str -> str) so any
    function with the same shape can stand in for them.
    """

    def __init__(self, config: Any = None, logger: Optional[Any] = None, command: Optional[str] = None) -> None:
        self.config = config
        self.logger = logger
        self._command = command

    def _option(self, key: str, fallback: Any = None) -> Any:
        if self.config is None:
            return fallback
        return self.config.get_option('EDITOR', key, fallback=fallback)

    def command(self) -> List[str]:
        raw = (self._command
               or self._option('command', None)
               or os.environ.get('VISUAL')
               or os.environ.get('EDITOR')
               or 'vi')
        parts = shlex.split(str(raw))
        if not parts:
            raise EditorError('No editor command configured')
        return parts

    def edit(self, text: str) -> str:
        suffix = str(self._option('suffix', '.txt') or '.txt')
        cmd = self.command()
        with tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False, encoding='utf-8') as temp_file:
            temp_file.write(text)
            path = temp_file.name

        if self.logger:
            self.logger.editor_begin(cmd, len(text))
        try:
            try:
                result = subprocess.run(cmd + [path])
            except OSError as e:
                if self.logger:
                    self.logger.editor_end('failed')
                raise EditorError(f"Could not start editor '{cmd[0]}': {e}") from e

            if result.returncode != 0:
                if self.logger:
                    self.logger.editor_end('failed', returncode=result.returncode)
                raise EditorError('Editor exited with non-zero status', returncode=result.returncode)

            try:
                with open(path, 'r', encoding='utf-8') as f:
                    edited = f.read()
            except OSError as e:
                raise EditorError(f"Could not read edited file: {e}") from e
        finally:
            try:
                os.remove(path)
            except OSError:
                pass

        if self.logger:
            self.logger.editor_end('success', returncode=0, chars=len(edited))
        return edited

    __call__ = edit
