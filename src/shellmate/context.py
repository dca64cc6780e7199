"""Gather context for a completion request."""

import logging
import os
import platform

from shellmate.history import ShellHistory, blocks_to_string
from shellmate.models import ShellmateConfig

log = logging.getLogger(__name__)


def _get_distro() -> str:
    """Return the OS distribution name (e.g. 'Debian GNU/Linux 12', 'macOS 14.0')."""
    system = platform.system()
    if system == "Darwin":
        mac_ver = platform.mac_ver()[0]
        return f"macOS {mac_ver}" if mac_ver else "macOS"
    try:
        info = platform.freedesktop_os_release()
        return info.get("PRETTY_NAME", info.get("NAME", system))
    except OSError:
        return system


def get_system_info() -> str:
    """Return a summary of the operating system and shell."""
    distro = _get_distro()
    kernel = platform.release()
    shell = os.environ.get("SHELL", "unknown")
    return f"OS: {distro} ({kernel})\nShell: {shell}"


def history_context(history: ShellHistory, config: ShellmateConfig) -> str:
    """Flatten the most recent history that fits the configured byte budget."""
    blocks = history.get_last_n_bytes(config.context_bytes, config.history_scan_limit)
    # A window that starts inside a run of output lines begins with its separator.
    context = blocks_to_string(blocks).lstrip("\n")
    log.debug(
        "history context: %d of %d blocks, %d chars", len(blocks), len(history), len(context)
    )
    return context
