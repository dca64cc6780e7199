"""Shell startup files that install the prompt marker hook."""

import logging
import tempfile

log = logging.getLogger(__name__)

# Runs before every prompt and emits the marker matched by MARKER_RE with the
# previous command's exit status and text. The user's own PROMPT_COMMAND
# still runs afterwards.
BASH_HOOK = r"""[ -f ~/.bashrc ] && source ~/.bashrc
export SHELLMATE_ACTIVE=1
__shellmate_prompt_command() {
    local __shellmate_status=$?
    printf '\033]7770;%d;%s\007' "$__shellmate_status" \
        "$(HISTTIMEFORMAT= history 1 | sed 's/^ *[0-9]* *//')"
    return $__shellmate_status
}
PROMPT_COMMAND="__shellmate_prompt_command${PROMPT_COMMAND:+; $PROMPT_COMMAND}"
"""


def write_bash_rcfile() -> str:
    """Write a temporary bashrc with the marker hook and return its path."""
    with tempfile.NamedTemporaryFile(
        mode="w", prefix="shellmate_", suffix=".bashrc", delete=False, encoding="utf-8"
    ) as rc:
        rc.write(BASH_HOOK)
    log.debug("wrote bash rcfile %s", rc.name)
    return rc.name
