from __future__ import annotations

from typing import Iterable

from base_classes import ParseError, OutOfRangeSelection, EmptyOptionsError
from prompts.base import PromptBuilder
from utils.input_utils import parse_ordinal


class Selection(PromptBuilder):
    """
    Choice from a numbered list of options. The user answers with the 1-based
    number of an option and gets the option text back.
    """

    kind = 'selection'

    def options(self, opts: Iterable[str]) -> 'Selection':
        """Sets the list of options, in display order."""
        if isinstance(opts, str):
            raise TypeError('options expects an iterable of strings, not a single string')
        return self._replace(options=tuple(str(o) for o in opts))

    def get_selection(self) -> str:
        options = self.config.options
        if not options:
            raise EmptyOptionsError()

        out = self.utils.output
        out.prompt(self.config.message, end='\n')
        for i, option in enumerate(options, start=1):
            out.prompt(f'{i}. {option}', end='\n')

        choice_prompt = self._setting('PROMPTS', 'choice_prompt', 'Enter your choice (1-{count}): ')
        invalid = self._setting('PROMPTS', 'invalid_choice_message', 'Invalid choice. Please try again.')

        def attempt() -> str:
            out.prompt(choice_prompt.format(count=len(options)))
            raw = self.utils.input.read_required_line()
            try:
                choice = parse_ordinal(raw)
            except ValueError as e:
                raise ParseError(invalid, raw=raw, target=int) from e
            if not 1 <= choice <= len(options):
                raise OutOfRangeSelection(invalid, choice=choice, count=len(options))
            return options[choice - 1]

        return self._loop().run(attempt, meta={'options': len(options)})
