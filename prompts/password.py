from __future__ import annotations

from base_classes import ReadError, EndOfInput
from prompts.base import PromptBuilder


class Password(PromptBuilder):
    """Password input read without echo. The value is returned as typed and never logged."""

    kind = 'password'

    def get_password(self) -> str:
        def attempt() -> str:
            self.utils.output.prompt(self.config.message)
            try:
                return self.utils.input.read_secret()
            except EndOfInput:
                raise
            except ReadError as e:
                reason = e.cause if e.cause is not None else e.user_message
                raise ReadError(f'Error reading password: {reason}', cause=e.cause) from e

        return self._loop().run(attempt, retry_on=(ReadError,), log_value=False)
