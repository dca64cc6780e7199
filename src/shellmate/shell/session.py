"""Track what happens in a wrapped shell and record it as typed history."""

import logging
import re
from collections import deque
from dataclasses import dataclass

from shellmate.ansi import split_incomplete
from shellmate.buffer import ShellBuffer
from shellmate.context import history_context
from shellmate.history import DEFAULT_SCAN_LIMIT, HistoryType, ShellHistory
from shellmate.models import ShellmateConfig
from shellmate.shell.constants import MARKER_RE, MAX_MARKER_BYTES, PARTIAL_MARKER_RE

log = logging.getLogger(__name__)

# Keystrokes: a run of ordinary bytes optionally followed by Enter or Ctrl-C.
_INPUT_RE = re.compile(rb"([^\r\n\x03]*)([\r\n\x03]?)")
# Output: a run of bytes optionally followed by a newline.
_OUTPUT_RE = re.compile(rb"([^\n]*)(\n?)")

CTRL_C = b"\x03"


@dataclass(frozen=True)
class PromptMarker:
    """Exit status and text of the command that just finished."""

    exit_code: int
    command: str


class ShellSession:
    """Feed a shell's keystrokes and output into line buffers and history.

    User keystrokes are replayed into an input buffer.  Enter pressed at a
    prompt on a non-blank line means a command was submitted; text typed into
    running programs (passwords included) is never kept.  The command itself
    is recorded when the next prompt marker arrives, using the command line
    bash reports in the marker, so lines recalled from history or completed
    with Tab are recorded as bash ran them.  The replayed keystrokes are the
    fallback when the marker carries no command.

    Output is replayed into an output buffer one line at a time.  Lines of a
    running command are kept until its prompt marker so they are recorded
    after the command that produced them.  The echo of the command line
    itself is dropped.
    """

    def __init__(self, history: ShellHistory | None = None) -> None:
        self.history = history if history is not None else ShellHistory()
        self._input = ShellBuffer()
        self._output = ShellBuffer()
        self._held = b""
        self._marker_tail = b""
        self._lines: deque[str] = deque(maxlen=DEFAULT_SCAN_LIMIT)
        self._submitted: str | None = None
        self._at_prompt = False
        self._skip_echo = False
        self._in_output_run = False

    @property
    def at_prompt(self) -> bool:
        return self._at_prompt

    def on_input(self, data: bytes) -> None:
        """Consume bytes typed by the user."""
        for match in _INPUT_RE.finditer(data):
            text, end = match.groups()
            if text:
                self._input.write(text)
            if end == CTRL_C:
                self._input.reset()
            elif end:
                self._flush_input()

    def on_output(self, data: bytes) -> tuple[bytes, list[PromptMarker]]:
        """Consume shell output.

        A marker cut off at the end of *data* is held back, and left out of
        the returned output, until the read that completes it.

        Returns:
            The output with prompt markers removed, ready for display, and the
            markers found in it, in order.
        """
        data = self._marker_tail + data
        self._marker_tail = b""
        tail = PARTIAL_MARKER_RE.search(data)
        if tail and len(data) - tail.start() <= MAX_MARKER_BYTES:
            data, self._marker_tail = data[: tail.start()], data[tail.start() :]

        markers: list[PromptMarker] = []
        start = 0
        for match in MARKER_RE.finditer(data):
            self._feed_output(data[start : match.start()])
            marker = PromptMarker(
                exit_code=int(match.group(1)),
                command=match.group(2).decode(errors="replace").strip(),
            )
            self._on_prompt(marker)
            markers.append(marker)
            start = match.end()
        self._feed_output(data[start:])

        clean = MARKER_RE.sub(b"", data) if markers else data
        return clean, markers

    def record_prompt(self, text: str) -> None:
        self._append(HistoryType.PROMPT, text)

    def record_model_output(self, text: str) -> None:
        self._append(HistoryType.LLM_OUTPUT, text)

    def context(self, config: ShellmateConfig) -> str:
        """Return the recent history as a single string for the model."""
        return history_context(self.history, config)

    def _append(self, kind: HistoryType, content: str) -> None:
        self.history.append(kind, content)
        self._in_output_run = kind is HistoryType.SHELL_OUTPUT

    def _flush_input(self) -> None:
        line = self._input.render()
        self._input.reset()
        if not self._at_prompt:
            return
        self._at_prompt = False
        self._skip_echo = True
        if line.strip():
            self._submitted = line

    def _feed_output(self, data: bytes) -> None:
        if not data:
            return
        # Keep an escape sequence cut off at the end of this read for the next one.
        ready, self._held = split_incomplete(self._held + data)
        for match in _OUTPUT_RE.finditer(ready):
            text, newline = match.groups()
            if newline:
                # The CR of a CRLF line ending is not part of the line.
                text = text.rstrip(b"\r")
            if text:
                self._output.write(text)
            if newline:
                self._flush_output()

    def _flush_output(self) -> None:
        line = self._output.render().rstrip("\r")
        self._output.reset()
        if self._at_prompt:
            # Nothing is running: the line is the prompt or a redraw of it.
            return
        if self._skip_echo:
            # First line after Enter is the shell echoing the command line.
            self._skip_echo = False
            return
        if line.strip():
            self._lines.append(line)

    def _on_prompt(self, marker: PromptMarker) -> None:
        log.debug("prompt marker: exit=%d command=%r", marker.exit_code, marker.command)
        self._flush_output()
        self._held = b""
        if self._submitted is not None:
            self._append(HistoryType.SHELL_INPUT, marker.command or self._submitted)
            self._submitted = None
        self._record_output()
        self._at_prompt = True
        self._skip_echo = False

    def _record_output(self) -> None:
        # Lines of one run are joined by a leading newline on all but the first.
        for line in self._lines:
            self._append(HistoryType.SHELL_OUTPUT, "\n" + line if self._in_output_run else line)
        self._lines.clear()
