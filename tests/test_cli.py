"""Tests for the ts command line."""

from __future__ import annotations

import io
import re

import pytest

from cli import main, parse_args, select_mode
from stream import Mode


def _run(argv: list[str], text: str) -> str:
    out = io.StringIO()
    assert main(argv, stdin=io.StringIO(text), stdout=out) == 0
    return out.getvalue()


def test_prepends_epoch_seconds() -> None:
    out = _run(["%s"], "a\nb\n")
    assert re.fullmatch(r"\d+ a\n\d+ b\n", out)


def test_relative_with_format() -> None:
    out = _run(["-r", "%Y"], "2025-12-22T22:25:23 x\nplain\n")
    assert out == "2025 x\nplain\n"


def test_unique_mode() -> None:
    out = _run(["-u", "T"], "a\na\nb\n")
    assert out == "T a\nT b\n"


def test_env_format_is_the_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TS_FORMAT", "[%Y]")
    out = _run([], "x\n")
    assert re.fullmatch(r"\[\d{4}\] x\n", out)


def test_env_format_does_not_disable_humanizing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TS_FORMAT", "%Y")
    out = _run(["-r"], "1755921813 x\n")
    assert out.endswith(" ago x\n")


@pytest.mark.parametrize(
    ("argv", "mode"),
    [
        ([], Mode.ABSOLUTE),
        (["-r"], Mode.RELATIVE),
        (["-r", "-i"], Mode.RELATIVE),
        (["-i"], Mode.INCREMENTAL),
        (["-s"], Mode.SINCE_START),
    ],
)
def test_select_mode(argv: list[str], mode: Mode) -> None:
    assert select_mode(parse_args(argv)) == mode


def test_incremental_and_since_start_conflict() -> None:
    with pytest.raises(SystemExit):
        parse_args(["-i", "-s"])


def test_undecodable_bytes_pass_through_unchanged() -> None:
    raw_in = io.BytesIO(b"ok\n\xff bad\nafter\n")
    raw_out = io.BytesIO()
    stdin = io.TextIOWrapper(raw_in, encoding="utf-8", errors="strict")
    stdout = io.TextIOWrapper(raw_out, encoding="utf-8", errors="strict")

    assert main(["-u", "T"], stdin=stdin, stdout=stdout) == 0

    assert raw_out.getvalue() == b"T ok\nT \xff bad\nT after\n"


def test_undecodable_bytes_around_a_converted_timestamp() -> None:
    raw_in = io.BytesIO(b"\xfe 2025-12-22T22:25:23 \xff\r\n")
    raw_out = io.BytesIO()
    stdin = io.TextIOWrapper(raw_in, encoding="utf-8")
    stdout = io.TextIOWrapper(raw_out, encoding="utf-8")

    main(["-r", "%Y"], stdin=stdin, stdout=stdout)

    assert raw_out.getvalue() == b"\xfe 2025 \xff\r\n"


def test_log_level_is_case_insensitive() -> None:
    assert parse_args(["--log-level", "debug"]).log_level == "DEBUG"


def test_unknown_log_level_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--log-level", "loud"])
    assert excinfo.value.code == 2


def test_unknown_env_log_level_is_a_usage_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("TS_LOG_LEVEL", "loud")
    with pytest.raises(SystemExit) as excinfo:
        main([], stdin=io.StringIO("x\n"), stdout=io.StringIO())
    assert excinfo.value.code == 2
    assert "TS_LOG_LEVEL" in capsys.readouterr().err
