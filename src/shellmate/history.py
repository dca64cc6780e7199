"""Typed rolling history of a wrapped shell session."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_SCAN_LIMIT = 512


class HistoryType(str, Enum):
    """Kind of content recorded in the history."""

    PROMPT = "prompt"
    SHELL_INPUT = "shell_input"
    SHELL_OUTPUT = "shell_output"
    LLM_OUTPUT = "llm_output"


@dataclass(frozen=True)
class HistoryBlock:
    kind: HistoryType
    content: str

    @property
    def size(self) -> int:
        """Size of the content in UTF-8 bytes."""
        return len(self.content.encode("utf-8"))


class ShellHistory:
    """Append-only log of prompts, shell I/O and model output.

    Insertion order is the only ordering; callers that append from several
    sources must serialize their appends themselves.
    """

    def __init__(self) -> None:
        self._blocks: list[HistoryBlock] = []

    def __len__(self) -> int:
        return len(self._blocks)

    def append(self, kind: HistoryType, content: str) -> None:
        self._blocks.append(HistoryBlock(HistoryType(kind), content))

    def entries(self) -> list[HistoryBlock]:
        return list(self._blocks)

    def get_last_n_bytes(
        self, max_bytes: int, limit: int = DEFAULT_SCAN_LIMIT
    ) -> list[HistoryBlock]:
        """Return the most recent whole blocks that fit in *max_bytes*.

        Blocks are taken newest first and never truncated: the walk stops at
        the first block that would push the total over the budget.  At most
        *limit* blocks are scanned.  The result is in chronological order.

        Args:
            max_bytes: Budget for the combined UTF-8 size of block contents.
            limit: Maximum number of blocks scanned back from the newest.

        Returns:
            A new list of blocks, oldest first.
        """
        if max_bytes <= 0 or limit <= 0:
            return []

        selected: list[HistoryBlock] = []
        total = 0
        for block in reversed(self._blocks[-limit:]):
            if total + block.size > max_bytes:
                break
            total += block.size
            selected.append(block)

        selected.reverse()
        return selected


def blocks_to_string(blocks: list[HistoryBlock]) -> str:
    """Join blocks, separating neighbours of different types with a newline."""
    parts: list[str] = []
    previous: HistoryType | None = None
    for block in blocks:
        if previous is not None and block.kind != previous:
            parts.append("\n")
        parts.append(block.content)
        previous = block.kind
    return "".join(parts)
