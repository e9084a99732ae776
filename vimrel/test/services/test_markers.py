"""Tests for services/markers.py."""

from __future__ import annotations

from pathlib import Path

from vimrel.core.result import Err, Ok
from vimrel.output.console import MockConsole
from vimrel.services.markers import (
    find_script_id,
    find_version,
    format_version,
    parse_loaded_version,
    parse_script_id,
)


class TestFormatVersion:
    def test_examples(self) -> None:
        assert format_version(702) == "7.02"
        assert format_version(105) == "1.05"

    def test_minor_is_zero_padded(self) -> None:
        assert format_version(100) == "1.00"
        assert format_version(1) == "0.01"

    def test_large_major(self) -> None:
        assert format_version(1234) == "12.34"


class TestParseScriptId:
    def test_plain_line(self) -> None:
        assert parse_script_id('" GetLatestVimScripts: 1863 1 tlib.vim', "tlib") == "1863"

    def test_auto_install(self) -> None:
        line = '" GetLatestVimScripts: 1863 1 :AutoInstall: tlib.vim'
        assert parse_script_id(line, "tlib") == "1863"

    def test_trailing_newline(self) -> None:
        assert parse_script_id('" GetLatestVimScripts: 42 7 foo.vim\n', "foo") == "42"

    def test_name_must_match_exactly(self) -> None:
        line = '" GetLatestVimScripts: 1863 1 tlib.vim'
        assert parse_script_id(line, "lib") is None
        assert parse_script_id(line, "tli") is None
        assert parse_script_id('" GetLatestVimScripts: 1863 1 tlibx.vim', "tlib") is None

    def test_name_is_not_a_pattern(self) -> None:
        line = '" GetLatestVimScripts: 10 1 aXb.vim'
        assert parse_script_id(line, "a.b") is None

    def test_dot_vim_is_literal(self) -> None:
        assert parse_script_id('" GetLatestVimScripts: 10 1 fooxvim', "foo") is None

    def test_zero_id_is_rejected(self) -> None:
        assert parse_script_id('" GetLatestVimScripts: 000 1 foo.vim', "foo") is None

    def test_other_lines(self) -> None:
        assert parse_script_id("let loaded_foo = 100", "foo") is None
        assert parse_script_id(' " GetLatestVimScripts: 10 1 foo.vim', "foo") is None


class TestParseLoadedVersion:
    def test_plain(self) -> None:
        assert parse_loaded_version("let loaded_tlib = 105", "tlib") == "1.05"

    def test_global_scope(self) -> None:
        assert parse_loaded_version("let g:loaded_tlib = 702", "tlib") == "7.02"

    def test_name_must_match_exactly(self) -> None:
        assert parse_loaded_version("let loaded_tlibx = 105", "tlib") is None
        assert parse_loaded_version("let loaded_tlib = 105", "tlibx") is None

    def test_not_a_number(self) -> None:
        assert parse_loaded_version("let loaded_tlib = 1", "tlib") == "0.01"
        assert parse_loaded_version("let loaded_tlib = 'x'", "tlib") is None
        assert parse_loaded_version("let loaded_tlib = 1.05", "tlib") is None


class TestFindInFiles:
    def test_first_match_in_file_then_line_order(self, tmp_path: Path) -> None:
        first = tmp_path / "plugin.vim"
        second = tmp_path / "autoload.vim"
        first.write_text(
            "\n".join(
                [
                    '" no marker here',
                    '" GetLatestVimScripts: 11 1 foo.vim',
                    '" GetLatestVimScripts: 12 1 foo.vim',
                ]
            ),
            encoding="utf-8",
        )
        second.write_text('" GetLatestVimScripts: 13 1 foo.vim\n', encoding="utf-8")

        console = MockConsole()
        assert find_script_id([first, second], "foo", console=console) == Ok("11")
        assert find_script_id([second, first], "foo", console=console) == Ok("13")

    def test_not_found(self, tmp_path: Path) -> None:
        src = tmp_path / "foo.vim"
        src.write_text('" GetLatestVimScripts: 11 1 bar.vim\n', encoding="utf-8")

        assert find_script_id([src], "foo", console=MockConsole()) == Ok(None)
        assert find_version([src], "foo", console=MockConsole()) == Ok(None)

    def test_version_in_second_file(self, tmp_path: Path) -> None:
        a = tmp_path / "a.vim"
        b = tmp_path / "b.vim"
        a.write_text("set nocompatible\n", encoding="utf-8")
        b.write_text("if exists('loaded_foo')\n  finish\nendif\nlet loaded_foo = 203\n", encoding="utf-8")

        assert find_version([a, b], "foo", console=MockConsole()) == Ok("2.03")

    def test_missing_file(self, tmp_path: Path) -> None:
        result = find_version([tmp_path / "missing.vim"], "foo", console=MockConsole())
        assert isinstance(result, Err)
        assert result.error.path == tmp_path / "missing.vim"

    def test_debug_output(self, tmp_path: Path) -> None:
        src = tmp_path / "foo.vim"
        src.write_text("let g:loaded_foo = 100\n", encoding="utf-8")
        console = MockConsole()

        find_version([src], "foo", console=console)

        assert console.find("Version number is 1.00")
