from __future__ import annotations

import os
import sys
import subprocess

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest

from base_classes import EditorError
from utils.editor_utils import ExternalEditor


class FakeConfig:
    def __init__(self, opts=None):
        self._opts = opts or {}

    def get_option(self, section, option, fallback=None):
        if section != 'EDITOR':
            return fallback
        return self._opts.get(option, fallback)


class RecordingLogger:
    def __init__(self):
        self.events = []

    def editor_begin(self, command, chars):
        self.events.append(('begin', command, chars))

    def editor_end(self, status, returncode=None, chars=None):
        self.events.append(('end', status, returncode))


def fake_run(append_text='', returncode=0):
    calls = []

    def run(cmd, *args, **kwargs):
        calls.append(cmd)
        path = cmd[-1]
        with open(path, 'a', encoding='utf-8') as f:
            f.write(append_text)
        return subprocess.CompletedProcess(cmd, returncode)

    return run, calls


def test_command_resolution_order(monkeypatch):
    monkeypatch.delenv('VISUAL', raising=False)
    monkeypatch.delenv('EDITOR', raising=False)
    assert ExternalEditor().command() == ['vi']
    monkeypatch.setenv('EDITOR', 'nano -w')
    assert ExternalEditor().command() == ['nano', '-w']
    monkeypatch.setenv('VISUAL', 'code --wait')
    assert ExternalEditor().command() == ['code', '--wait']
    assert ExternalEditor(FakeConfig({'command': 'emacs -nw'})).command() == ['emacs', '-nw']
    assert ExternalEditor(command='ed').command() == ['ed']


def test_edit_returns_file_contents_and_removes_temp_file(monkeypatch):
    run, calls = fake_run(append_text='more\n')
    monkeypatch.setattr(subprocess, 'run', run)
    logger = RecordingLogger()
    editor = ExternalEditor(FakeConfig({'command': 'myeditor'}), logger)
    assert editor('draft\n') == 'draft\nmore\n'
    cmd = calls[0]
    assert cmd[0] == 'myeditor'
    assert cmd[-1].endswith('.txt')
    assert not os.path.exists(cmd[-1])
    assert logger.events == [('begin', ['myeditor'], 6), ('end', 'success', 0)]


def test_non_zero_exit_raises_editor_error(monkeypatch):
    run, calls = fake_run(returncode=2)
    monkeypatch.setattr(subprocess, 'run', run)
    with pytest.raises(EditorError) as info:
        ExternalEditor(command='myeditor').edit('x')
    assert info.value.returncode == 2
    assert not os.path.exists(calls[0][-1])


def test_missing_editor_binary_raises_editor_error(monkeypatch):
    def run(cmd, *args, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, 'run', run)
    with pytest.raises(EditorError, match="Could not start editor 'nope'"):
        ExternalEditor(command='nope').edit('x')


def test_blank_command_is_rejected(monkeypatch):
    with pytest.raises(EditorError):
        ExternalEditor(command='   ').command()
