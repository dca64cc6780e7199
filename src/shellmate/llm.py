"""LLM interaction for shellmate."""

import json
import logging

import litellm
from pydantic import ValidationError

from shellmate.extract import extract_command
from shellmate.models import DEFAULT_OLLAMA_HOST, CommandResponse, ShellmateConfig
from shellmate.prompt import LLMMessage

log = logging.getLogger(__name__)

# Suppress litellm's noisy logging
litellm.suppress_debug_info = True


def parse_response(content: str) -> CommandResponse:
    """Turn raw model text into a CommandResponse.

    JSON matching the schema is used as is.  Anything else is searched for a
    quoted or fenced command, and as a last resort the whole text is taken as
    the command.
    """
    try:
        data = json.loads(content)
        return CommandResponse(**data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        log.debug("JSON parse failed (%s), extracting command from raw content", e)

    try:
        return CommandResponse(command=extract_command(content), explanation=content)
    except ValueError:
        return CommandResponse(command=content)


def query_llm(
    messages: list[LLMMessage], config: ShellmateConfig | None = None
) -> tuple[CommandResponse, str]:
    """Send messages to the LLM and return the parsed response and raw text.

    Args:
        messages: Conversation messages to send, in LiteLLM format.
        config: Shellmate configuration; uses defaults when not provided.

    Returns:
        The parsed command suggestion and the stripped raw response text.

    Raises:
        litellm.exceptions.APIConnectionError: On LLM provider connectivity errors.
        litellm.exceptions.AuthenticationError: On invalid or missing API key.
    """
    config = config or ShellmateConfig()
    model = config.model
    log.debug("model=%s", model)
    log.debug("messages=%s", json.dumps(messages, indent=2))

    kwargs: dict[str, object] = {
        "model": model,
        "messages": messages,
        "temperature": 0,
        "max_tokens": 256,
        "timeout": config.request_timeout,
    }
    if config.api_key:
        kwargs["api_key"] = config.api_key
    if model.startswith("ollama/"):
        kwargs["api_base"] = config.ollama_host or DEFAULT_OLLAMA_HOST

    response = litellm.completion(**kwargs)

    content = (response.choices[0].message.content or "").strip()
    log.debug("raw response: %s", content)
    return parse_response(content), content
