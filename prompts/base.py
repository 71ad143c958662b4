from __future__ import annotations

from dataclasses import dataclass, replace, asdict
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from base_classes import PromptError, ParseError, EndOfInput, RetryLimitExceeded
from core.cancellation import CancellationToken
from utils.input_utils import config_flag

T = TypeVar('T')
B = TypeVar('B', bound='PromptBuilder')


@dataclass(frozen=True)
class PromptConfig:
    """
    Settings for one prompt. Never mutated: builders swap in a new instance.
    max_attempts of None means keep asking until the input is valid.
    """
    message: str = ''
    default: Optional[str] = None
    show_tips: bool = True
    multiline: bool = False
    options: Tuple[str, ...] = ()
    editor: bool = False
    max_attempts: Optional[int] = None


class PromptLoop:
    """
    Drives one prompt: call `attempt` until it returns a value.

    Errors listed in `retry_on` are written to the error channel and the
    attempt is repeated, up to `max_attempts` when one is set. End of input is
    never retried. The cancellation token, when given, is checked before
    every attempt.
    """

    def __init__(self, utils, kind: str, max_attempts: Optional[int] = None,
                 cancel_token: Optional[CancellationToken] = None) -> None:
        self.utils = utils
        self.kind = kind
        self.max_attempts = max_attempts
        self.cancel_token = cancel_token
        self.attempts = 0

    def run(
            self,
            attempt: Callable[[], T],
            retry_on: Tuple[Type[PromptError], ...] = (ParseError,),
            meta: Optional[Dict[str, Any]] = None,
            log_value: bool = True
    ) -> T:
        logger = self.utils.logger
        logger.prompt_start(self.kind, meta or {})
        self.attempts = 0
        while True:
            if self.cancel_token is not None:
                self.cancel_token.raise_if_cancelled()
            self.attempts += 1
            try:
                value = attempt()
            except PromptError as e:
                if isinstance(e, EndOfInput) or not isinstance(e, retry_on):
                    logger.error(f'prompts.{self.kind}', e)
                    raise
                self.utils.output.error(e.user_message)
                logger.prompt_retry(self.kind, self.attempts, e)
                if self.max_attempts and self.attempts >= self.max_attempts:
                    raise RetryLimitExceeded(self.attempts, e) from e
                continue
            logger.prompt_done(self.kind, self.attempts, value if log_value else None)
            return value


class PromptBuilder:
    """
    Base for the chained prompt builders. Every configuration method returns a
    new builder; the receiver is left untouched.
    """

    kind = 'prompt'

    def __init__(self, utils, config: Optional[PromptConfig] = None,
                 cancel_token: Optional[CancellationToken] = None) -> None:
        self.utils = utils
        self.config = config if config is not None else self.initial_config(utils.config)
        self._cancel_token = cancel_token

    @staticmethod
    def initial_config(settings: Any) -> PromptConfig:
        """Defaults taken from the [PROMPTS] and [EDITOR] configuration sections."""
        max_attempts = int(settings.get_option('PROMPTS', 'max_attempts', fallback=0) or 0)
        return PromptConfig(
            show_tips=config_flag(settings.get_option('PROMPTS', 'show_tips', fallback=True)),
            editor=config_flag(settings.get_option('EDITOR', 'active', fallback=False)),
            max_attempts=max_attempts or None,
        )

    def _replace(self: B, **changes: Any) -> B:
        return type(self)(self.utils, replace(self.config, **changes), self._cancel_token)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.config == other.config

    def __hash__(self) -> int:
        return hash((type(self), self.config))

    def __repr__(self) -> str:
        fields = ', '.join(f'{k}={v!r}' for k, v in asdict(self.config).items())
        return f'{type(self).__name__}({fields})'

    def message(self: B, msg: str) -> B:
        """Sets the prompt message."""
        return self._replace(message=str(msg))

    def max_attempts(self: B, attempts: Optional[int]) -> B:
        """Caps the number of rejected inputs; None or 0 keeps asking forever."""
        if attempts is not None and attempts < 0:
            raise ValueError('max_attempts must be zero or positive')
        return self._replace(max_attempts=attempts or None)

    def cancel_token(self: B, token: Optional[CancellationToken]) -> B:
        """Attaches a token that aborts the prompt with PromptCancelled once cancelled."""
        return type(self)(self.utils, self.config, token)

    def _loop(self) -> PromptLoop:
        return PromptLoop(self.utils, self.kind, self.config.max_attempts, self._cancel_token)

    def _setting(self, section: str, option: str, fallback: str) -> str:
        value = self.utils.config.get_option(section, option, fallback=fallback)
        return fallback if value is None else str(value)
