"""PTY shell loop implementation.

Spawns bash inside a PTY. All I/O passes through to the real terminal
unchanged apart from the invisible prompt markers, which are stripped.
Keystrokes and output are also fed to a ShellSession so that, when a
command fails, the model is asked for a fix with the recent session as
context.  Esc or Ctrl-C cancels a fix request while it is running.
"""

import fcntl
import logging
import os
import select
import signal
import struct
import sys
import termios
import tty

from shellmate.models import ShellmateConfig
from shellmate.shell.assist import should_ask_for_fix, status_line, suggest_fix
from shellmate.shell.hooks import write_bash_rcfile
from shellmate.shell.session import ShellSession

log = logging.getLogger(__name__)

READ_SIZE = 4096


def _winsize(fd: int) -> tuple[int, int, int, int]:
    """Return (rows, cols, xpixel, ypixel) for the given tty fd."""
    return struct.unpack("HHHH", fcntl.ioctl(fd, termios.TIOCGWINSZ, b"\x00" * 8))


def _set_winsize(fd: int, rows: int, cols: int, xp: int = 0, yp: int = 0) -> None:
    fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", rows, cols, xp, yp))


def _pump_output(
    data: bytes, session: ShellSession, config: ShellmateConfig, stdin_fd: int, stdout_fd: int
) -> None:
    """Display shell output and react to any finished commands in it.

    A fix request blocks output until it finishes; Esc or Ctrl-C on *stdin_fd*
    cancels it.
    """
    clean, markers = session.on_output(data)
    for marker in markers:
        if should_ask_for_fix(marker):
            os.write(stdout_fd, suggest_fix(session, marker, config, stdin_fd))
    if clean:
        os.write(stdout_fd, clean)


def shell_loop(config: ShellmateConfig, session: ShellSession | None = None) -> int:
    """Run the PTY-based interactive shell loop and return bash's exit code."""
    if not sys.stdin.isatty():
        print("Error: stdin must be a terminal", file=sys.stderr)
        return 1
    if not hasattr(os, "fork"):
        print("Error: interactive shell mode requires a POSIX environment", file=sys.stderr)
        return 1

    session = session or ShellSession()
    rcfile = write_bash_rcfile()
    master_fd, slave_fd = os.openpty()

    # Match the slave PTY size to the real terminal.
    rows, cols, xp, yp = _winsize(sys.stdin.fileno())
    _set_winsize(slave_fd, rows, cols, xp, yp)

    pid = os.fork()
    if pid == 0:
        # Child process: exec bash attached to the slave PTY.
        os.close(master_fd)
        os.setsid()
        fcntl.ioctl(slave_fd, termios.TIOCSCTTY, 0)
        os.dup2(slave_fd, 0)
        os.dup2(slave_fd, 1)
        os.dup2(slave_fd, 2)
        if slave_fd > 2:
            os.close(slave_fd)
        os.execvp("bash", ["bash", "--rcfile", rcfile, "-i"])
        os._exit(1)

    # Parent process: shuttle bytes between real terminal and PTY.
    os.close(slave_fd)
    log.debug("spawned bash pid=%d", pid)

    # Forward window-resize signals to the child.
    def _on_winch(_signum, _frame):
        try:
            r, c, xp, yp = _winsize(sys.stdin.fileno())
            _set_winsize(master_fd, r, c, xp, yp)
            os.kill(pid, signal.SIGWINCH)
        except OSError:
            pass

    signal.signal(signal.SIGWINCH, _on_winch)

    # Put the real terminal into raw mode so keystrokes pass through directly.
    old_attrs = termios.tcgetattr(sys.stdin.fileno())
    tty.setraw(sys.stdin.fileno())

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    os.write(stdout_fd, status_line())

    try:
        while True:
            try:
                rfds, _, _ = select.select([stdin_fd, master_fd], [], [])
            except (OSError, ValueError):
                break

            # Stdin -> PTY master (user keystrokes)
            if stdin_fd in rfds:
                try:
                    data = os.read(stdin_fd, 1024)
                except OSError:
                    break
                if not data:
                    break
                os.write(master_fd, data)
                session.on_input(data)

            # PTY master -> stdout (shell output)
            if master_fd in rfds:
                try:
                    data = os.read(master_fd, READ_SIZE)
                except OSError:
                    break
                if not data:
                    break
                _pump_output(data, session, config, stdin_fd, stdout_fd)
    finally:
        termios.tcsetattr(sys.stdin.fileno(), termios.TCSAFLUSH, old_attrs)
        try:
            os.unlink(rcfile)
        except OSError:
            pass

    _, status = os.waitpid(pid, 0)
    log.debug("bash exited, %d history entries recorded", len(session.history))
    return os.waitstatus_to_exitcode(status)
