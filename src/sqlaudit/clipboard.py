"""Copy text to the system clipboard.

Prefers the platform clipboard tool. When none is installed (headless boxes,
SSH sessions) the text is sent to the terminal as an OSC 52 escape sequence,
which most modern terminal emulators turn into a clipboard write.
"""

from __future__ import annotations

import base64
import enum
import logging
import platform
import shutil
import subprocess
import sys
from typing import TextIO

from sqlaudit.errors import ClipboardError

logger = logging.getLogger(__name__)

# Candidate commands per platform, first available wins
_NATIVE_COMMANDS: dict[str, list[list[str]]] = {
    "Darwin": [["pbcopy"]],
    "Windows": [["clip"]],
    "Linux": [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ],
}

_COPY_TIMEOUT = 5


class CopyOutcome(enum.Enum):
    NATIVE = "native"
    FALLBACK = "fallback"
    SKIPPED = "skipped"


class ClipboardService:
    """Writes text to the clipboard, falling back to the terminal."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def copy(self, text: str | None) -> CopyOutcome:
        """Copy ``text``; empty text is a no-op.

        Raises ClipboardError when neither the native tool nor the terminal
        fallback accepts the text.
        """
        if not text:
            return CopyOutcome.SKIPPED

        if self._copy_native(text):
            return CopyOutcome.NATIVE
        if self._copy_osc52(text):
            logger.debug("Copied %d chars via terminal escape sequence", len(text))
            return CopyOutcome.FALLBACK

        logger.warning("Clipboard copy failed: no clipboard tool and no terminal")
        raise ClipboardError("Copy failed; select and copy the text manually")

    def _copy_native(self, text: str) -> bool:
        for command in _NATIVE_COMMANDS.get(platform.system(), []):
            if shutil.which(command[0]) is None:
                continue
            try:
                result = subprocess.run(
                    command,
                    input=text.encode("utf-8"),
                    capture_output=True,
                    timeout=_COPY_TIMEOUT,
                )
            except (subprocess.TimeoutExpired, OSError) as e:
                logger.debug("Clipboard command %s failed: %s", command[0], e)
                continue
            if result.returncode == 0:
                return True
            logger.debug(
                "Clipboard command %s exited with %d", command[0], result.returncode
            )
        return False

    def _copy_osc52(self, text: str) -> bool:
        stream = self._stream or sys.stdout
        isatty = getattr(stream, "isatty", None)
        if not callable(isatty) or not isatty():
            return False
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        try:
            stream.write(f"\x1b]52;c;{encoded}\x07")
            stream.flush()
        except OSError as e:
            logger.debug("Terminal clipboard write failed: %s", e)
            return False
        return True
