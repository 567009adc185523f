"""Tests for clipboard copy with the terminal fallback."""

from __future__ import annotations

import base64
import io
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from sqlaudit.clipboard import ClipboardService, CopyOutcome
from sqlaudit.errors import ClipboardError


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


def _completed(returncode: int = 0) -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    return result


def test_empty_text_skipped():
    with patch("sqlaudit.clipboard.subprocess.run") as run:
        assert ClipboardService().copy("") is CopyOutcome.SKIPPED
        assert ClipboardService().copy(None) is CopyOutcome.SKIPPED
    run.assert_not_called()


@patch("sqlaudit.clipboard.platform.system", return_value="Darwin")
@patch("sqlaudit.clipboard.shutil.which", return_value="/usr/bin/pbcopy")
@patch("sqlaudit.clipboard.subprocess.run", return_value=_completed())
def test_native_tool(mock_run, mock_which, mock_system):
    assert ClipboardService().copy("SELECT id FROM t") is CopyOutcome.NATIVE

    args, kwargs = mock_run.call_args
    assert args[0] == ["pbcopy"]
    assert kwargs["input"] == b"SELECT id FROM t"


@patch("sqlaudit.clipboard.platform.system", return_value="Linux")
@patch("sqlaudit.clipboard.subprocess.run", return_value=_completed())
def test_first_installed_linux_tool_wins(mock_run, mock_system):
    def which(name):
        return "/usr/bin/xclip" if name == "xclip" else None

    with patch("sqlaudit.clipboard.shutil.which", side_effect=which):
        assert ClipboardService().copy("x") is CopyOutcome.NATIVE

    assert mock_run.call_args[0][0] == ["xclip", "-selection", "clipboard"]


@patch("sqlaudit.clipboard.platform.system", return_value="Linux")
@patch("sqlaudit.clipboard.shutil.which", return_value=None)
def test_terminal_fallback(mock_which, mock_system):
    terminal = _Terminal()

    outcome = ClipboardService(stream=terminal).copy("SELECT 1")

    assert outcome is CopyOutcome.FALLBACK
    encoded = base64.b64encode(b"SELECT 1").decode("ascii")
    assert terminal.getvalue() == f"\x1b]52;c;{encoded}\x07"


@patch("sqlaudit.clipboard.platform.system", return_value="Linux")
@patch("sqlaudit.clipboard.shutil.which", return_value="/usr/bin/wl-copy")
@patch(
    "sqlaudit.clipboard.subprocess.run",
    side_effect=subprocess.TimeoutExpired("wl-copy", 5),
)
def test_failing_tool_falls_back(mock_run, mock_which, mock_system):
    assert ClipboardService(stream=_Terminal()).copy("x") is CopyOutcome.FALLBACK


@patch("sqlaudit.clipboard.platform.system", return_value="Windows")
@patch("sqlaudit.clipboard.shutil.which", return_value="clip.exe")
@patch("sqlaudit.clipboard.subprocess.run", return_value=_completed(1))
def test_both_paths_fail(mock_run, mock_which, mock_system):
    not_a_tty = io.StringIO()

    with pytest.raises(ClipboardError, match="manually"):
        ClipboardService(stream=not_a_tty).copy("SELECT 1")
    assert not_a_tty.getvalue() == ""
