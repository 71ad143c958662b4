from __future__ import annotations

import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from io import StringIO
from utils.output_utils import OutputHandler, OutputLevel, ColorSystem, Style


class DummyConfig:
    def __init__(self, **opts):
        self._opts = {'colors': False, 'output_level': 'INFO', **opts}

    def get_option(self, section: str, option: str, fallback=None):
        if section == 'DEFAULT' and option in self._opts:
            return self._opts[option]
        return fallback


def make_handler(**opts):
    out = OutputHandler(DummyConfig(**opts))
    buf, err = StringIO(), StringIO()
    out.set_stream(buf)
    out.set_error_stream(err)
    return out, buf, err


def test_diagnostics_go_to_error_stream():
    out, buf, err = make_handler()
    out.info('shown')
    out.warning('careful')
    out.error('bad input')
    assert buf.getvalue() == 'shown\n'
    assert err.getvalue() == 'careful\nbad input\n'


def test_prompt_ignores_output_level_and_has_no_newline():
    out, buf, _ = make_handler(output_level='ERROR')
    out.info('hidden')
    out.prompt('Name: ')
    out.tip('(tip)')
    assert buf.getvalue() == 'Name: (tip)\n'


def test_level_threshold_filters_debug():
    out, buf, _ = make_handler()
    out.debug('noise')
    out.write('kept', prefix='note')
    assert buf.getvalue() == 'note: kept\n'


def test_invalid_level_falls_back_to_info(monkeypatch):
    err = StringIO()
    monkeypatch.setattr(sys, 'stderr', err)
    out = OutputHandler(DummyConfig(output_level='LOUD'))
    assert out.level is OutputLevel.INFO
    assert "Invalid output level 'LOUD'" in err.getvalue()


def test_style_text_is_plain_without_color():
    out, _, _ = make_handler()
    assert out.style_text('x', fg='red', bold=True) == 'x'


def test_color_system_codes():
    assert ColorSystem.style_text('x', Style()) == 'x'
    assert ColorSystem.style_text('x', Style(fg='red', bold=True)) == '\033[31;1mx\033[0m'
    assert ColorSystem.style_text('x', Style(bg='#0a0b0c')) == '\033[48;2;10;11;12mx\033[0m'


def test_no_color_env_disables_color(monkeypatch):
    monkeypatch.setenv('NO_COLOR', '1')
    out, _, _ = make_handler(colors=True)
    assert out.style_text('x', fg='red') == 'x'
