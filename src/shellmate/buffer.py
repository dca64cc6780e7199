"""Single-line terminal buffer that replays cursor moves and deletions."""

import codecs
import logging
import re

log = logging.getLogger(__name__)

ERASE_CHARS = "\x08\x7f"

# Complete CSI sequence, a deletion control, or a run of anything else.
# A lone ESC that does not start a complete CSI sequence is kept as text.
_TOKEN_RE = re.compile(
    r"(?P<csi>\x1b\[(?P<params>[^\x40-\x7e]*)(?P<final>[\x40-\x7e]))"
    r"|(?P<erase>[\x08\x7f])"
    r"|(?P<text>\x1b|[^\x1b\x08\x7f]+)"
)

# Trailing ESC or ESC [ <params> with no final character yet.
_PENDING_RE = re.compile(r"\x1b(?:\[[^\x40-\x7e]*)?\Z")

# Cursor forward / cursor back, with an optional decimal count.
_MOVES = {"C": 1, "D": -1}
_COUNT_RE = re.compile(r"[0-9]*")


class ShellBuffer:
    """Reconstruct the visible text of one terminal line from raw output.

    Printable text is inserted at the cursor, backspace and delete remove the
    character before the cursor, and ``ESC [ n C`` / ``ESC [ n D`` move the
    cursor.  Every other escape sequence is stored verbatim where it was
    written.  Bytes are decoded incrementally as UTF-8, so multi-byte
    characters and escape sequences may be split across ``write`` calls.
    """

    def __init__(self) -> None:
        self._line = ""
        self._cursor = 0
        self._pending = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._line)

    def __str__(self) -> str:
        return self.render()

    def render(self) -> str:
        """Return the line content as accumulated so far."""
        return self._line

    def reset(self) -> None:
        """Forget the current line, e.g. when a new prompt starts."""
        self._line = ""
        self._cursor = 0
        self._pending = ""
        self._decoder.reset()

    def write(self, data: bytes | str) -> None:
        """Feed a chunk of terminal output into the buffer."""
        if isinstance(data, bytes):
            data = self._decoder.decode(data)
        text = self._pending + data

        pending = _PENDING_RE.search(text)
        if pending:
            self._pending = pending.group()
            text = text[: pending.start()]
        else:
            self._pending = ""

        for match in _TOKEN_RE.finditer(text):
            if match.group("csi"):
                self._apply_csi(match.group(), match.group("params"), match.group("final"))
            elif match.group("erase"):
                self._erase()
            else:
                self._insert(match.group("text"))

    def _insert(self, text: str) -> None:
        self._line = self._line[: self._cursor] + text + self._line[self._cursor :]
        self._cursor += len(text)

    def _erase(self) -> None:
        if self._cursor == 0:
            return
        self._line = self._line[: self._cursor - 1] + self._line[self._cursor :]
        self._cursor -= 1

    def _apply_csi(self, sequence: str, params: str, final: str) -> None:
        if final in _MOVES and _COUNT_RE.fullmatch(params):
            count = int(params) if params else 1
            # ESC [ 0 D moves one column, same as ESC [ D.
            count = max(count, 1)
            target = self._cursor + _MOVES[final] * count
            self._cursor = min(max(target, 0), len(self._line))
            return
        log.debug("keeping escape sequence %r verbatim", sequence)
        self._insert(sequence)
