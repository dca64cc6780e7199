"""Model suggestions for failed shell commands."""

import json
import logging
import os
import select
import signal

from shellmate.constants import BOLD, CYAN, RED, RESET
from shellmate.context import get_system_info
from shellmate.llm import parse_response, query_llm
from shellmate.models import CommandResponse, ShellmateConfig
from shellmate.prompt import LLMMessage, build_messages
from shellmate.shell.constants import SIGINT_EXIT_CODE
from shellmate.shell.session import PromptMarker, ShellSession

log = logging.getLogger(__name__)

# Keys that cancel a model request in flight: Ctrl-C and Esc.
CANCEL_KEYS = {b"\x03", b"\x1b"}
CANCELED = b"\r\nshellmate canceled.\r\n"


def should_ask_for_fix(marker: PromptMarker) -> bool:
    """Return whether a prompt marker should trigger an LLM suggestion."""
    # Ctrl-C is an intentional interruption, not a failure that needs help.
    if marker.exit_code == SIGINT_EXIT_CODE:
        return False
    return marker.exit_code != 0 and bool(marker.command.strip())


def supports_color() -> bool:
    """Return whether ANSI color output should be used."""
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def status_line() -> bytes:
    """Return a one-line banner shown when the wrapper shell starts."""
    message = "shellmate active (Ctrl-D to exit)\r\n"
    if supports_color():
        return f"{BOLD}{CYAN}{message}{RESET}".encode()
    return message.encode()


def query_llm_with_cancel(
    messages: list[LLMMessage], config: ShellmateConfig, stdin_fd: int
) -> str | None:
    """Run the model request in a child process so Esc/Ctrl-C can cancel it.

    Other keystrokes typed while waiting are discarded.

    Returns:
        The raw model reply, or None when the user canceled the request.

    Raises:
        RuntimeError: If the request failed or its result could not be read.
    """
    read_fd, write_fd = os.pipe()
    pid = os.fork()
    if pid == 0:
        os.close(read_fd)
        try:
            _, raw = query_llm(messages, config)
            result = {"raw": raw}
        except Exception as e:
            result = {"error": str(e) or type(e).__name__}
        try:
            os.write(write_fd, json.dumps(result).encode())
        finally:
            os.close(write_fd)
        os._exit(0)

    os.close(write_fd)
    payload = b""
    canceled = False
    try:
        while True:
            try:
                rfds, _, _ = select.select([stdin_fd, read_fd], [], [], 0.1)
            except OSError:
                break

            if stdin_fd in rfds:
                try:
                    key = os.read(stdin_fd, 1)
                except OSError:
                    key = b""
                if key in CANCEL_KEYS:
                    canceled = True
                    break

            if read_fd in rfds:
                try:
                    chunk = os.read(read_fd, 4096)
                except OSError:
                    break
                if not chunk:
                    break
                payload += chunk
    finally:
        os.close(read_fd)
        if canceled:
            try:
                os.kill(pid, signal.SIGTERM)
            except OSError:
                pass
        try:
            os.waitpid(pid, 0)
        except OSError:
            pass

    if canceled:
        log.debug("fix request canceled")
        return None

    try:
        result = json.loads(payload.decode())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RuntimeError("failed to read model response") from e
    if "error" in result:
        raise RuntimeError(result["error"])
    return result["raw"]


def ask_for_fix(
    session: ShellSession, marker: PromptMarker, config: ShellmateConfig, stdin_fd: int
) -> CommandResponse | None:
    """Ask the model to fix the command behind *marker*.

    The request is built from the session history as it stands.  Once the
    model answers, the request and its raw reply are both recorded in the
    history; a canceled request records nothing and returns None.
    """
    query = f"fix this command (exit status {marker.exit_code}): {marker.command}"
    messages = build_messages(query, session.context(config), get_system_info())
    raw = query_llm_with_cancel(messages, config, stdin_fd)
    if raw is None:
        return None
    session.record_prompt(query)
    session.record_model_output(raw)
    return parse_response(raw)


def format_suggestion(response: CommandResponse, config: ShellmateConfig) -> bytes:
    """Render a suggestion for a terminal in raw mode."""
    if supports_color():
        header = f"{BOLD}shellmate suggests:{RESET}"
        command = f"{BOLD}{CYAN}$ {response.command}{RESET}"
    else:
        header = "shellmate suggests:"
        command = f"$ {response.command}"
    msg = f"\r\n{header}\r\n  {command}\r\n"
    if config.show_explanation and response.explanation.strip():
        explanation = response.explanation.strip().replace("\n", "\r\n  ")
        msg += f"  {explanation}\r\n"
    return msg.encode()


def format_error(error: Exception) -> bytes:
    if supports_color():
        return f"\r\n{RED}shellmate error: {error}{RESET}\r\n".encode()
    return f"\r\nshellmate error: {error}\r\n".encode()


def suggest_fix(
    session: ShellSession, marker: PromptMarker, config: ShellmateConfig, stdin_fd: int
) -> bytes:
    """Return display bytes for a fix suggestion, or for the error that prevented one."""
    try:
        response = ask_for_fix(session, marker, config, stdin_fd)
    except Exception as e:
        log.debug("fix request failed: %s", e)
        return format_error(e)
    if response is None:
        return CANCELED
    return format_suggestion(response, config)
