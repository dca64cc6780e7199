"""Data models for shellmate."""

from pydantic import BaseModel, Field

DEFAULT_MODEL = "gemini/gemini-3-flash-preview"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_CONTEXT_BYTES = 4096
DEFAULT_HISTORY_SCAN_LIMIT = 512
DEFAULT_REQUEST_TIMEOUT = 30.0


class CommandResponse(BaseModel):

    command: str = Field(description=(
        "The corrected terminal command. "
        "The command must be a single, copy-pasteable terminal command. "
        "Use pipes, &&, or ; to chain commands if needed. "
        "Do not wrap the command in backticks or code blocks."
    ))
    explanation: str = Field(default="", description=(
        "One sentence explaining what went wrong and what the command does differently."
    ))


class ShellmateConfig(BaseModel):
    """Runtime configuration for shellmate."""

    provider: str | None = Field(
        default=None,
        description=(
            "Active LLM provider (e.g. 'gemini', 'anthropic', 'openai', 'xai', 'ollama')."
        ),
    )
    model: str = Field(
        default=DEFAULT_MODEL,
        description="LiteLLM model string (e.g. 'gemini/gemini-3-flash-preview').",
    )
    api_key: str | None = Field(
        default=None,
        description=(
            "API key for the active provider. Overridden at runtime by the provider's "
            "environment variable (e.g. GEMINI_API_KEY)."
        ),
    )
    ollama_host: str | None = Field(
        default=None,
        description=(
            "Base URL for a local Ollama server. Defaults to http://localhost:11434 "
            "when the 'ollama' provider is active. Overridden by OLLAMA_HOST env var."
        ),
    )
    context_bytes: int = Field(
        default=DEFAULT_CONTEXT_BYTES,
        ge=0,
        description=(
            "Byte budget for the recent shell history sent to the model. "
            "Overridden by SHELLMATE_CONTEXT_BYTES."
        ),
    )
    history_scan_limit: int = Field(
        default=DEFAULT_HISTORY_SCAN_LIMIT,
        ge=0,
        description="Maximum number of history entries considered for the context window.",
    )
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        description=(
            "Seconds to wait for the model before giving up. Overridden by SHELLMATE_TIMEOUT."
        ),
    )
    show_explanation: bool = Field(
        default=False,
        description=(
            "When True, show the model's explanation under a suggested fix. "
            "Overridden by SHELLMATE_EXPLAIN."
        ),
    )
