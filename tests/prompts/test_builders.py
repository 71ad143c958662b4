from __future__ import annotations

import os
import sys
import threading
from io import StringIO

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest

from base_classes import PromptCancelled
from config_manager import ConfigManager
from console_input import ConsoleInput
from core.cancellation import CancellationToken
from prompts import PromptConfig, Input
from utils.input_utils import ScriptedLineReader


def make_console(lines=(), **overrides):
    cfg = ConfigManager().create_session_config({'colors': False, **overrides})
    return ConsoleInput(cfg, reader=ScriptedLineReader(lines), stdout=StringIO(), stderr=StringIO())


def test_builder_methods_return_new_values():
    console = make_console()
    base = console.input()
    configured = base.message("Name: ").default("Ann").multiline().disable_tips()
    assert base.config.message == ""
    assert base.config.default is None
    assert base.config.multiline is False
    assert base.config.show_tips is True
    assert configured.config.message == "Name: "
    assert configured.config.default == "Ann"
    assert configured.config.multiline is True
    assert configured.config.show_tips is False


def test_non_overlapping_fields_are_order_independent():
    console = make_console()
    a = console.input().message("m").default("d")
    b = console.input().default("d").message("m")
    assert a == b
    assert a.config == b.config
    assert hash(a) == hash(b)


def test_last_write_wins_for_the_same_field():
    console = make_console()
    assert console.input().message("a").message("b").config.message == "b"


def test_config_is_frozen():
    config = PromptConfig(message="x")
    with pytest.raises(AttributeError):
        config.message = "y"


def test_initial_values_come_from_configuration():
    console = make_console(show_tips=False, max_attempts=4)
    cfg = console.input().config
    assert cfg.show_tips is False
    assert cfg.max_attempts == 4
    assert cfg.editor is True


def test_off_switches_in_configuration_are_false():
    cfg = make_console(show_tips='off', active='off').input().config
    assert cfg.show_tips is False
    assert cfg.editor is False

    assert make_console(show_tips='on').input().config.show_tips is True


def test_max_attempts_validation():
    console = make_console()
    assert console.input().max_attempts(0).config.max_attempts is None
    assert console.input().max_attempts(None).config.max_attempts is None
    with pytest.raises(ValueError):
        console.input().max_attempts(-1)


def test_different_builder_kinds_are_not_equal():
    console = make_console()
    assert console.input() != console.password()


def test_cancelled_token_stops_before_reading():
    reader = ScriptedLineReader(["never"])
    cfg = ConfigManager().create_session_config({'colors': False})
    console = ConsoleInput(cfg, reader=reader, stdout=StringIO(), stderr=StringIO())
    token = CancellationToken()
    token.cancel("shutting down")
    with pytest.raises(PromptCancelled) as info:
        console.input().cancel_token(token).get_input()
    assert info.value.reason == "shutting down"
    assert reader.consumed == 0


def test_token_cancelled_between_attempts():
    token = CancellationToken()

    class CancellingReader(ScriptedLineReader):
        def read_line(self):
            line = super().read_line()
            token.cancel("timeout")
            return line

    cfg = ConfigManager().create_session_config({'colors': False})
    console = ConsoleInput(cfg, reader=CancellingReader(["bad", "5"]), stdout=StringIO(), stderr=StringIO())
    with pytest.raises(PromptCancelled):
        console.input().cancel_token(token).get_int()


def test_cancel_token_survives_further_configuration():
    token = CancellationToken()
    prompt = make_console(["1"]).selection().cancel_token(token).options(["a"])
    t = threading.Thread(target=token.cancel)
    t.start()
    t.join()
    with pytest.raises(PromptCancelled):
        prompt.get_selection()


def test_builder_is_an_input():
    assert isinstance(make_console().input(), Input)
