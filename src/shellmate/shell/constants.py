"""Shared constants for shell integration."""

import re

# Invisible OSC escape sequence used as a marker in the PTY output stream.
# Format: \033]7770;<exit_code>;<command>\007
# Terminals ignore unknown OSC sequences, so the user never sees these.
MARKER_RE = re.compile(rb"\033\]7770;(\d+);([^\007]*)\007")

# Exit status bash reports for a command interrupted with Ctrl-C.
SIGINT_EXIT_CODE = 130

# A marker cut off at the end of a read: any prefix of the format above.
PARTIAL_MARKER_RE = re.compile(
    rb"\033(?:\](?:7(?:7(?:7(?:0(?:;\d*(?:;[^\007]*)?)?)?)?)?)?)?\Z"
)

# Longest unterminated marker held back before it is treated as plain output.
MAX_MARKER_BYTES = 4096
