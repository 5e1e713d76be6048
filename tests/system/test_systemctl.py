"""Tests for the systemctl helpers."""

import pytest

from onboard.exceptions import CommandError
from onboard.system import control_unit, parse_show_output, show_unit


class TestParseShowOutput:
    """Test cases for parse_show_output."""

    def test_parses_properties(self):
        status = parse_show_output("Result=success\nSubState=dead\n")

        assert status.result == "success"
        assert status.sub_state == "dead"
        assert status.finished is True

    def test_ignores_malformed_lines(self):
        status = parse_show_output("\nResult=exit-code\nbroken line\nA=b=c\nSubState=failed\n")

        assert status.result == "exit-code"
        assert status.sub_state == "failed"
        assert status.finished is False

    def test_empty_output(self):
        status = parse_show_output("")

        assert status.result == ""
        assert status.sub_state == ""


class TestSystemctlCommands:
    """Test cases for show_unit and control_unit."""

    @pytest.mark.asyncio
    async def test_show_unit(self, monkeypatch):
        commands: list[tuple[str, ...]] = []

        async def run_command(*args: str) -> str:
            commands.append(args)
            return "Result=success\nSubState=start\n"

        monkeypatch.setattr("onboard.system.systemctl.run_command", run_command)

        status = await show_unit("join.service")

        assert commands == [("systemctl", "show", "join.service", "--property", "Result", "--property", "SubState")]
        assert status.sub_state == "start"

    @pytest.mark.asyncio
    async def test_control_unit_failure(self, monkeypatch):
        async def run_command(*args: str) -> str:
            raise CommandError(list(args), "Unit join.service not found.")

        monkeypatch.setattr("onboard.system.systemctl.run_command", run_command)

        with pytest.raises(CommandError, match="not found"):
            await control_unit("restart", "join.service")
