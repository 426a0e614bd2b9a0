"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_document in JSON and YAML
- print_table in plain and JSON modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest
import yaml

from openapi2proto import output as output_module
from openapi2proto.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("openapi2proto.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("openapi2proto.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_yaml_stays_yaml(self, tty):
        assert OutputManager(format=OutputFormat.YAML).format == OutputFormat.YAML


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    def test_info_goes_to_stderr(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).info("loading local file a.yaml")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "loading local file a.yaml" in captured.err

    def test_error_goes_to_stderr(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).error("something broke")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Error: something broke" in captured.err

    def test_manager_has_no_warning_channel(self):
        assert not hasattr(OutputManager, "warning")
        assert not hasattr(output_module, "warning")

    def test_document_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).format_document({"a": 1})
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"a": 1}
        assert captured.err == ""


class TestQuietVerbose:
    def test_quiet_suppresses_info(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True).info("hidden")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True).error("shown")
        assert "shown" in capfd.readouterr().err

    def test_debug_needs_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("shown")
        err = capfd.readouterr().err
        assert "hidden" not in err
        assert "[debug] shown" in err


# ------------------------------------------------------------------ #
# Documents and tables
# ------------------------------------------------------------------ #


class TestFormatDocument:
    def test_yaml_keeps_key_order(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.YAML, no_color=True)
        mgr.format_document({"zeta": 1, "alpha": {"type": "integer"}})
        out = capfd.readouterr().out
        assert yaml.safe_load(out) == {"zeta": 1, "alpha": {"type": "integer"}}
        assert out.index("zeta") < out.index("alpha")

    def test_json_keeps_unicode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).format_document({"name": "Café"})
        assert "Café" in capfd.readouterr().out


class TestPrintTable:
    def test_plain_is_tab_separated(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/pets"]])
        assert capfd.readouterr().out.splitlines() == ["Method\tPath", "GET\t/pets"]

    def test_json_is_list_of_objects(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/pets"]])
        assert json.loads(capfd.readouterr().out) == [{"Method": "GET", "Path": "/pets"}]


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_then_get(self):
        mgr = OutputManager(format=OutputFormat.PLAIN, quiet=True)
        set_output(mgr)
        assert get_output() is mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.info("via module")
        assert "via module" in capfd.readouterr().err
