"""Tests for mkt.output.console module."""

from __future__ import annotations

import pytest

from mkt.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"


class TestMockConsole:
    def test_print_captures_message_and_style(self) -> None:
        console = MockConsole()
        console.print("hello", Style.DIM)
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DIM

    def test_level_helpers_prefix_messages(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("failed")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: failed", "warning: careful", "info: fyi"]

    def test_has_error_and_warning(self) -> None:
        console = MockConsole()
        assert not console.has_error()
        console.warning("w")
        assert console.has_warning()
        assert not console.has_error()
        console.error("e")
        assert console.has_error()

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.header("alpha")
        console.print("alpha.zip")
        console.newline()
        assert [o.message for o in console.find("alpha")] == ["alpha", "alpha.zip"]
        assert console.text == "alpha\nalpha.zip\n"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("ok")


class TestRichConsole:
    def test_brackets_are_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("objects/[Account]")
        console.error("bad [red]value[/red]")

        out = capsys.readouterr().out
        assert "objects/[Account]" in out
        assert "bad [red]value[/red]" in out

    def test_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=True).warning("to stderr")

        captured = capsys.readouterr()
        assert "to stderr" in captured.err
        assert "to stderr" not in captured.out
