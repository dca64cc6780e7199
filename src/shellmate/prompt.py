"""Prompt construction for shellmate."""

import json
from typing import TypedDict

from shellmate.models import CommandResponse

SYSTEM_PROMPT = f"""\
You are an assistant embedded in the user's interactive shell. You can see the \
recent terminal session: the commands the user typed, their output, and your \
own earlier answers. When a command fails, suggest the exact command that \
fixes it.

<critical>
Return **ONLY** valid JSON matching this schema:

{json.dumps(CommandResponse.model_json_schema())}

Hard requirements:
- Output exactly one JSON object and nothing else.
- The first character of your response must be `{{` and the last character must be `}}`.
- Do not include markdown, code fences, comments, prefixes, or suffixes.
- Ensure the JSON is syntactically valid and parseable by `json.loads`.
- Use only keys defined by the schema above.

</critical>
"""


class LLMMessage(TypedDict):
    """Single chat message for the LLM API."""

    role: str
    content: str


def build_messages(query: str, history: str, system_info: str = "") -> list[LLMMessage]:
    """Build the message list for the LLM call.

    Args:
        query: What the user wants, e.g. a request to fix a failed command.
        history: Flattened recent shell history.
        system_info: Optional OS and shell summary.
    """
    parts: list[str] = []

    if system_info:
        parts.append(f"System:\n{system_info}")

    if history:
        parts.append(f"Recent shell history:\n{history}")

    parts.append(f"Request: {query}")

    user_content = "\n\n".join(parts)
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]
