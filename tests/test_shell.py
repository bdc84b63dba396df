"""Tests for ethroute/shell.py - command execution with mocked subprocess."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock

import pytest
from ethroute.constants import COMMAND_TIMEOUT_EXIT_CODE
from ethroute.exceptions import CommandNotFoundError
from ethroute.shell import privileged, run_command


class TestRunCommand:
    """Tests for run_command function."""

    def test_successful_execution(self, mocker):
        """Returns (0, stdout, stderr) on success."""
        mock_run = mocker.patch("ethroute.shell.subprocess.run")
        mock_run.return_value = MagicMock(returncode=0, stdout=b"output", stderr=b"")

        rc, out, err = run_command(["netstat", "-rn"], timeout_s=5)

        assert (rc, out, err) == (0, "output", "")
        assert mock_run.call_args[0][0] == ["netstat", "-rn"]
        assert mock_run.call_args[1]["timeout"] == 5

    def test_nonzero_rc_does_not_raise(self, mocker):
        mock_run = mocker.patch("ethroute.shell.subprocess.run")
        mock_run.return_value = MagicMock(returncode=1, stdout=b"", stderr=b"File exists")

        rc, _out, err = run_command(["route", "add"])

        assert rc == 1
        assert err == "File exists"

    def test_input_passed_through(self, mocker):
        mock_run = mocker.patch("ethroute.shell.subprocess.run")
        mock_run.return_value = MagicMock(returncode=0, stdout=b"", stderr=b"")

        run_command(["tee", "-a", "/etc/hosts"], input_bytes=b"10.0.0.5 a\n")

        assert mock_run.call_args[1]["input"] == b"10.0.0.5 a\n"

    def test_timeout_returns_timeout_code(self, mocker):
        mock_run = mocker.patch("ethroute.shell.subprocess.run")
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["route"], timeout=1)

        rc, out, err = run_command(["route", "-n", "get", "10.0.0.5"], timeout_s=1)

        assert rc == COMMAND_TIMEOUT_EXIT_CODE
        assert out == ""
        assert "timeout" in err

    def test_missing_binary_raises(self, mocker):
        mock_run = mocker.patch("ethroute.shell.subprocess.run")
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(CommandNotFoundError, match="networksetup"):
            run_command(["networksetup", "-listallhardwareports"])


class TestPrivileged:
    """Tests for privileged function."""

    def test_with_sudo(self):
        assert privileged(["route", "add"], use_sudo=True) == ["sudo", "-n", "route", "add"]

    def test_without_sudo(self):
        assert privileged(["route", "add"], use_sudo=False) == ["route", "add"]
