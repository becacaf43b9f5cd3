"""Tests for scyllaclient.output.

Covers:
- OutputFormat resolution (AUTO -> RICH/PLAIN based on TTY)
- NO_COLOR / TERM=dumb handling
- stdout/stderr discipline and quiet/verbose modes
- to_jsonable conversion of decoded values
- JSON, plain and rich rendering of values and tables
"""

from __future__ import annotations

import ipaddress
import json

import pytest

from scyllaclient.models import SnapshotDetail
from scyllaclient.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    format_value,
    get_output,
    reset_output,
    set_output,
    to_jsonable,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("scyllaclient.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("scyllaclient.output._is_tty", lambda: True)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty):
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_is_plain_when_tty_but_no_color(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout / stderr
# ------------------------------------------------------------------ #


class TestStreams:
    def test_values_go_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_value(42)
        captured = capfd.readouterr()
        assert captured.out == "42\n"
        assert captured.err == ""

    def test_diagnostics_go_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.info("info msg")
        mgr.warning("warn msg")
        mgr.error("err msg")
        mgr.debug("debug msg")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "info msg" in captured.err
        assert "Warning: warn msg" in captured.err
        assert "Error: err msg" in captured.err
        assert "[debug] debug msg" in captured.err

    def test_quiet_suppresses_info_only(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.error("shown")
        captured = capfd.readouterr()
        assert "hidden" not in captured.err
        assert "shown" in captured.err

    def test_debug_hidden_without_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("nope")
        assert capfd.readouterr().err == ""


# ------------------------------------------------------------------ #
# to_jsonable
# ------------------------------------------------------------------ #


class TestToJsonable:
    def test_set_becomes_sorted_list(self):
        assert to_jsonable({"b", "a"}) == ["a", "b"]

    def test_tuple_becomes_list(self):
        assert to_jsonable((1, 2)) == [1, 2]

    def test_tuple_keys_joined(self):
        assert to_jsonable({("-100", "0"): ["10.0.0.1"]}) == {"-100,0": ["10.0.0.1"]}

    def test_address_keys_and_values(self):
        addr = ipaddress.ip_address("10.0.0.1")
        assert to_jsonable({addr: 0.5}) == {"10.0.0.1": 0.5}
        assert to_jsonable([addr]) == ["10.0.0.1"]

    def test_models_dumped(self):
        detail = SnapshotDetail(snapshot="s", keyspace="k", column_family="t", total=2, live=1)
        assert to_jsonable({"s": [detail]}) == {
            "s": [{"snapshot": "s", "keyspace": "k", "column_family": "t", "total": 2, "live": 1}]
        }

    def test_scalars_untouched(self):
        assert to_jsonable("x") == "x"
        assert to_jsonable(None) is None


# ------------------------------------------------------------------ #
# Rendering
# ------------------------------------------------------------------ #


class TestJsonFormat:
    def test_map_as_indented_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_value({"a": 1})
        out = capfd.readouterr().out
        assert json.loads(out) == {"a": 1}
        assert "\n  " in out

    def test_histogram_tuple(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_value((1, 2, 3))
        assert json.loads(capfd.readouterr().out) == [1, 2, 3]

    def test_table_as_records(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(["A", "B"], [["1", "2"]])
        assert json.loads(capfd.readouterr().out) == [{"A": "1", "B": "2"}]


class TestPlainFormat:
    def test_map_as_key_value_lines(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_value(
            {"10.0.0.1": 0.5, "dc1": ["a", "b"]}
        )
        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["10.0.0.1\t0.5", 'dc1\t["a", "b"]']

    def test_list_one_per_line(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_value(["x", "y"])
        assert capfd.readouterr().out.split() == ["x", "y"]

    def test_none_prints_nothing(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_value(None)
        assert capfd.readouterr().out == ""

    def test_table_tab_separated(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_table(
            ["A", "B"], [["1", "2"]]
        )
        assert capfd.readouterr().out == "A\tB\n1\t2\n"


class TestRichFormat:
    def test_map_produces_output(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH).format_value({"key": "value"})
        out = capfd.readouterr().out
        assert "key" in out
        assert "value" in out

    def test_table_produces_output(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH).print_table(["Snapshot"], [["snap1"]], title="Snapshots")
        out = capfd.readouterr().out
        assert "snap1" in out


# ------------------------------------------------------------------ #
# Global manager
# ------------------------------------------------------------------ #


class TestGlobalOutput:
    def test_get_output_is_lazy_singleton(self):
        reset_output()
        assert get_output() is get_output()

    def test_set_output_used_by_helpers(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.JSON))
        format_value({"x"})
        assert json.loads(capfd.readouterr().out) == ["x"]
