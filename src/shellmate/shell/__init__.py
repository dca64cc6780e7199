"""PTY shell integration for shellmate."""
