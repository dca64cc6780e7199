"""Unit tests for shellmate.cli."""

from unittest.mock import MagicMock, patch

import pytest

from shellmate import __version__
from shellmate.cli import entrypoint, main
from shellmate.models import ShellmateConfig


def _cli_patches(**overrides):
    defaults = dict(
        load_config=MagicMock(return_value=ShellmateConfig()),
        shell_loop=MagicMock(return_value=0),
    )
    defaults.update(overrides)
    return patch.multiple("shellmate.cli", **defaults)


class TestMain:
    def test_runs_shell_loop_with_loaded_config(self):
        config = ShellmateConfig(model="openai/gpt-4o")
        mock_loop = MagicMock(return_value=0)
        with _cli_patches(load_config=MagicMock(return_value=config), shell_loop=mock_loop):
            assert main([]) == 0
        mock_loop.assert_called_once_with(config)

    def test_returns_shell_exit_code(self):
        with _cli_patches(shell_loop=MagicMock(return_value=3)):
            assert main([]) == 3

    def test_flags_override_config(self):
        mock_loop = MagicMock(return_value=0)
        with _cli_patches(shell_loop=mock_loop):
            main(
                ["-m", "ollama/llama3", "--explain", "--context-bytes", "1024", "--timeout", "5"]
            )
        config = mock_loop.call_args[0][0]
        assert config.model == "ollama/llama3"
        assert config.show_explanation is True
        assert config.context_bytes == 1024
        assert config.request_timeout == 5

    def test_negative_context_bytes_clamped(self):
        mock_loop = MagicMock(return_value=0)
        with _cli_patches(shell_loop=mock_loop):
            main(["--context-bytes", "-5"])
        assert mock_loop.call_args[0][0].context_bytes == 0

    def test_non_positive_timeout_is_ignored(self):
        mock_loop = MagicMock(return_value=0)
        with _cli_patches(shell_loop=mock_loop):
            main(["--timeout", "0"])
        assert mock_loop.call_args[0][0].request_timeout == 30.0

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_debug_flag_enables_debug_logging(self):
        with _cli_patches():
            with patch("shellmate.cli.logging.basicConfig") as mock_basic:
                main(["--debug"])
        assert mock_basic.call_args.kwargs["level"] == 10


class TestEntrypoint:
    def test_exits_with_main_result(self):
        with _cli_patches(shell_loop=MagicMock(return_value=2)):
            with patch("sys.argv", ["shellmate"]):
                with pytest.raises(SystemExit) as exc:
                    entrypoint()
        assert exc.value.code == 2
