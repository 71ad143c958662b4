"""Chained prompt builders.

Each builder holds an immutable PromptConfig; configuration methods return a
new builder and the get_* methods run the shared read/validate/retry loop.
"""

from prompts.base import PromptConfig, PromptLoop, PromptBuilder
from prompts.input import Input
from prompts.password import Password
from prompts.selection import Selection

__all__ = ['PromptConfig', 'PromptLoop', 'PromptBuilder', 'Input', 'Password', 'Selection']
