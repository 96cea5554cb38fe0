"""
Single-key cancel listener.

Puts the terminal in cbreak mode so a lone ESC arrives without Enter,
and polls stdin from a worker thread so the event loop keeps serving the
simctl calls.
"""

import asyncio
import codecs
import os
import select
import sys
import termios
import tty
from typing import Callable, List, Optional, TextIO

from simroute.core.logging_utils import get_module_logger

ESC = "\x1b"
_POLL_SECONDS = 0.2
_READ_SIZE = 64


def split_keys(chunk: str) -> List[str]:
    """Split a burst of terminal input into individual key presses.

    Escape sequences stay whole: CSI (``ESC [ ... final``, e.g. arrow
    keys), SS3 (``ESC O x``, e.g. F1) and Alt+key (``ESC x``). Only an ESC
    at the end of the chunk or directly before another ESC is a lone ESC.
    """
    keys: List[str] = []
    i = 0
    end = len(chunk)
    while i < end:
        if chunk[i] != ESC or i + 1 >= end or chunk[i + 1] == ESC:
            keys.append(chunk[i])
            i += 1
            continue

        lead = chunk[i + 1]
        if lead == "[":
            j = i + 2
            while j < end and not "\x40" <= chunk[j] <= "\x7e":
                j += 1
            keys.append(chunk[i:j + 1])
            i = j + 1
        elif lead == "O":
            keys.append(chunk[i:i + 3])
            i += 3
        else:
            keys.append(chunk[i:i + 2])
            i += 2
    return keys


class KeyListener:

    def __init__(self, cancel_key: str = ESC, stream: Optional[TextIO] = None):
        self.logger = get_module_logger("KeyListener")
        self.cancel_key = cancel_key
        self.stream = stream if stream is not None else sys.stdin
        self._fd: Optional[int] = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._running = False

    def _input_fd(self) -> Optional[int]:
        if self.stream is None:
            return None
        try:
            return self.stream.fileno()
        except (AttributeError, OSError, ValueError):
            return None

    def _read_chunk(self) -> Optional[str]:
        """Return pending input, ``""`` at EOF, or None if nothing arrived.

        Reads the descriptor directly; a buffered ``read`` would pull bytes
        out from under ``select`` and strand them.
        """
        ready, _, _ = select.select([self._fd], [], [], _POLL_SECONDS)
        if not ready:
            return None
        data = os.read(self._fd, _READ_SIZE)
        if not data:
            return ""
        # A split multi-byte character decodes to nothing until completed.
        return self._decoder.decode(data) or None

    def _enter_cbreak(self):
        try:
            old_settings = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
            return old_settings
        except (termios.error, OSError, ValueError) as e:
            self.logger.warning("Could not set up keyboard input: %s", e)
            return None

    def _restore(self, old_settings) -> None:
        if old_settings is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, old_settings)
        except (termios.error, OSError) as e:
            self.logger.debug("Could not restore terminal settings: %s", e)

    async def listen(self, on_cancel: Callable[[str], object]) -> None:
        """Call ``on_cancel("keyboard")`` each time the cancel key is pressed.

        Returns after ``stop()``, when stdin reaches EOF, or at once when
        there is no stdin to read.
        """
        self._fd = self._input_fd()
        if self._fd is None:
            self.logger.warning("No keyboard input available; stop with Ctrl-C or SIGTERM")
            return

        self._running = True
        old_settings = self._enter_cbreak()
        self.logger.debug("Keyboard listener active")

        try:
            while self._running:
                chunk = await asyncio.to_thread(self._read_chunk)
                if chunk is None:
                    continue
                if chunk == "":
                    self.logger.info("stdin closed; keyboard cancel unavailable")
                    break
                for key in split_keys(chunk):
                    if key == self.cancel_key:
                        on_cancel("keyboard")
        finally:
            self._running = False
            self._restore(old_settings)
            self.logger.debug("Keyboard listener ended")

    def stop(self) -> None:
        self._running = False
