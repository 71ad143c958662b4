from __future__ import annotations

import os
import sys

from click.testing import CliRunner

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from main import cli


def test_demo_walkthrough():
    answers = "\n".join([
        "Ada",          # name
        "",             # age -> default 19
        "Curious",      # bio line 1
        "mind",         # bio line 2
    ]) + "\n"
    # Multiline input runs to end of stream, so the selection prompt sees EOF
    runner = CliRunner()
    res = runner.invoke(cli, ["--no-editor", "demo"], input=answers)
    assert "Hello, Ada!" in res.output
    assert "You are 19 years old." in res.output
    assert "Your bio:\nCurious\nmind" in res.output
    assert res.exit_code == 1
    assert "Input stream closed" in res.output


def test_ask_typed_value_with_retries():
    runner = CliRunner()
    res = runner.invoke(cli, ["ask", "Age: ", "--type", "int"], input="abc\n12x\n42\n")
    assert res.exit_code == 0
    assert res.stdout.rstrip().endswith("42")
    assert res.stderr.count("Please enter a valid integer") == 2


def test_ask_default_and_multiline():
    runner = CliRunner()
    res = runner.invoke(cli, ["ask", "Name: ", "-d", "Bob"], input="\n")
    assert res.exit_code == 0
    assert res.stdout.endswith("Bob\n")

    res = runner.invoke(cli, ["--no-editor", "ask", "Bio", "-m", "--no-tips"], input="one\ntwo\n")
    assert res.exit_code == 0
    assert res.stdout == "Bio\none\ntwo\n"


def test_select_command():
    runner = CliRunner()
    res = runner.invoke(cli, ["select", "Choose a color", "Red", "Green", "Blue"], input="0\nabc\n2\n")
    assert res.exit_code == 0
    assert res.stdout.rstrip().endswith("Green")
    assert res.stderr.count("Invalid choice. Please try again.") == 2


def test_max_attempts_option_stops_retrying():
    runner = CliRunner()
    res = runner.invoke(cli, ["--max-attempts", "1", "select", "Pick", "a", "b"], input="9\n1\n")
    assert res.exit_code == 1
    assert "No valid input after 1 attempt(s)" in res.output


def test_secret_prints_length_only():
    runner = CliRunner()
    res = runner.invoke(cli, ["secret", "Password: "], input="hunter2\n")
    assert res.exit_code == 0
    assert "hunter2" not in res.output
    assert res.stdout.rstrip().endswith("7")


def test_multiline_typed_answer_stops_at_end_of_input():
    runner = CliRunner()
    res = runner.invoke(cli, ["--no-editor", "ask", "Count", "-m", "--no-tips", "--type", "int"], input="abc\n")
    assert res.exit_code == 1
    assert res.stderr.count("Please enter a valid integer") == 1
    assert "Input stream closed" in res.stderr


def test_editor_follows_configuration_without_flag(tmp_path):
    conf = tmp_path / "custom.ini"
    conf.write_text("[EDITOR]\nactive = false\n", encoding="utf-8")
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(conf), "ask", "Bio", "-m"], input="x\n")
    assert res.exit_code == 0
    assert "@e" not in res.stdout

    res = runner.invoke(cli, ["ask", "Bio", "-m"], input="x\n")
    assert res.exit_code == 0
    assert "@e" in res.stdout
