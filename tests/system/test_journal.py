"""Tests for the journal helpers."""

from unittest.mock import AsyncMock, patch

import pytest

from onboard.exceptions import CommandError
from onboard.system import LOG_NAMES, follow_journal, log_matchers


class FakeProcess:
    """journalctl stand-in yielding fixed output lines."""

    def __init__(self, lines: list[bytes] | None, returncode: int = 0):
        self.pid = 4242
        self.stdout = self._stream(lines) if lines is not None else None
        self.returncode = None
        self._exit_code = returncode
        self.terminated = False

    @staticmethod
    async def _stream(lines: list[bytes]):
        for line in lines:
            yield line

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = -15

    async def wait(self) -> int:
        if self.returncode is None:
            self.returncode = self._exit_code
        return self.returncode


class TestLogMatchers:
    """Test cases for log_matchers."""

    def test_networkd(self):
        assert log_matchers("systemd-networkd", "wlan0") == ["SYSLOG_IDENTIFIER=systemd-networkd", "INTERFACE=wlan0"]

    def test_wpa_supplicant(self):
        assert log_matchers("wpa_supplicant", "wlan1") == ["SYSLOG_IDENTIFIER=wpa_supplicant@wlan1"]

    def test_unknown(self):
        assert log_matchers("sshd", "wlan0") is None

    def test_every_log_name_has_matchers(self):
        assert all(log_matchers(name, "wlan0") for name in LOG_NAMES)


class TestFollowJournal:
    """Test cases for follow_journal."""

    @pytest.mark.asyncio
    async def test_yields_non_empty_lines(self):
        process = FakeProcess([b'{"MESSAGE":"wlan0: Gained carrier"}\n', b"\n", b'{"MESSAGE":"wlan0: DHCPv4 address"}\n'])

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as create:
            lines = [line async for line in follow_journal(["SYSLOG_IDENTIFIER=systemd-networkd"])]

        assert lines == ['{"MESSAGE":"wlan0: Gained carrier"}', '{"MESSAGE":"wlan0: DHCPv4 address"}']
        assert create.call_args.args[-1] == "SYSLOG_IDENTIFIER=systemd-networkd"
        assert process.terminated is False

    @pytest.mark.asyncio
    async def test_failed_exit(self):
        process = FakeProcess([], returncode=1)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CommandError, match="exited with status 1"):
                async for _ in follow_journal([]):
                    pass

    @pytest.mark.asyncio
    async def test_missing_output_stream(self):
        process = FakeProcess(None)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CommandError, match="no output stream"):
                async for _ in follow_journal([]):
                    pass

        assert process.terminated is True

    @pytest.mark.asyncio
    async def test_missing_journalctl(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("journalctl"))):
            with pytest.raises(CommandError, match="command not found"):
                async for _ in follow_journal([]):
                    pass
