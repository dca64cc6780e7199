"""Pull a shell command out of free-form model text."""

import re

# A fenced block: ```[lang]\n<command>\n```
_FENCE_RE = re.compile(r"```[\w-]*\n(.*?)\n?```", re.DOTALL)


def extract_command(text: str) -> str:
    """Return the command suggested in *text*.

    Two forms are recognized, checked in this order: a line starting with
    ``> `` (the whole rest of the line is the command), and the first
    non-empty line of the first fenced code block.

    Raises:
        ValueError: If *text* contains neither form.
    """
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("> ") and stripped[2:].strip():
            return stripped[2:].strip()

    for block in _FENCE_RE.findall(text):
        for line in block.splitlines():
            if line.strip():
                return line.strip()

    raise ValueError("no command found in model output")
