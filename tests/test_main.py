"""Tests for the command-line entry point."""

import sys
import os
from unittest.mock import AsyncMock, patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import main
from config import ConfigurationError
from core.logger import RelayLogger
from sdk.exceptions import TransportError


class TestCli:
    """Validate exit codes and shutdown."""

    @patch.object(RelayLogger, "cleanup")
    @patch("main.check_connection", new_callable=AsyncMock)
    def test_success_prints_summary(self, mock_check: AsyncMock, mock_cleanup, capsys) -> None:
        mock_check.return_value = "Connected as @relay_bot; test message sent to chat 1000"

        assert main.cli(["test"]) == 0

        assert "@relay_bot" in capsys.readouterr().out
        mock_cleanup.assert_called_once()

    @patch.object(RelayLogger, "cleanup")
    @patch("main.check_connection", new_callable=AsyncMock)
    def test_configuration_error_exit_code(self, mock_check: AsyncMock, mock_cleanup) -> None:
        mock_check.side_effect = ConfigurationError("missing chat_id")

        assert main.cli(["test"]) == 2
        mock_cleanup.assert_called_once()

    @patch.object(RelayLogger, "cleanup")
    @patch("main.check_connection", new_callable=AsyncMock)
    def test_api_failure_exit_code(self, mock_check: AsyncMock, mock_cleanup) -> None:
        mock_check.side_effect = TransportError("getMe", ConnectionError("down"))

        assert main.cli(["test"]) == 1
        mock_cleanup.assert_called_once()
