"""Tests for ActionRunner."""

import asyncio

import pytest

from onboard.configuration import Action, FileAction, SystemdAction
from onboard.exceptions import ActionError, CommandError
from onboard.system import ActionRunner


class RecordingController:
    """systemctl replacement recording the commands it was asked to run."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.commands: list[tuple[str, str]] = []

    async def __call__(self, command: str, unit: str) -> None:
        self.commands.append((command, unit))
        if self.fail:
            raise CommandError(["systemctl", command, unit], "Unit not found.")


class TestActionRunner:
    """Test cases for ActionRunner."""

    @pytest.mark.asyncio
    async def test_file_from_value(self, tmp_path):
        target = tmp_path / "hostname"
        runner = ActionRunner([Action(name="hostname", file=FileAction(path=str(target), value="name"))])

        await runner.run({"name": "sensor-01"})

        assert target.read_text() == "sensor-01"

    @pytest.mark.asyncio
    async def test_file_from_template(self, tmp_path):
        target = tmp_path / "wpa.conf"
        template = 'network={\n  ssid="{{ ssid }}"\n  psk="{{ psk }}"\n}\n'
        runner = ActionRunner([Action(name="wpa", file=FileAction(path=str(target), template=template))])

        await runner.run({"ssid": "home", "psk": "hunter2"})

        assert target.read_text() == 'network={\n  ssid="home"\n  psk="hunter2"\n}\n'

    @pytest.mark.asyncio
    async def test_actions_run_in_order(self, tmp_path):
        controller = RecordingController()
        runner = ActionRunner(
            [
                Action(name="stop", systemd=SystemdAction(unit="wpa_supplicant@wlan0.service", command="stop")),
                Action(name="write", file=FileAction(path=str(tmp_path / "out"), value="ssid")),
                Action(name="start", systemd=SystemdAction(unit="wpa_supplicant@wlan0.service", command="start")),
            ],
            controller=controller,
        )

        await runner.run({"ssid": "home"})

        assert len(runner) == 3
        assert controller.commands == [
            ("stop", "wpa_supplicant@wlan0.service"),
            ("start", "wpa_supplicant@wlan0.service"),
        ]

    @pytest.mark.asyncio
    async def test_failure_stops_run(self, tmp_path):
        target = tmp_path / "out"
        runner = ActionRunner(
            [
                Action(name="restart", systemd=SystemdAction(unit="join.service", command="restart")),
                Action(name="write", file=FileAction(path=str(target), value="ssid")),
            ],
            controller=RecordingController(fail=True),
        )

        with pytest.raises(ActionError) as exc_info:
            await runner.run({"ssid": "home"})

        assert exc_info.value.action_name == "restart"
        assert not target.exists()

    @pytest.mark.asyncio
    async def test_missing_template_value(self, tmp_path):
        runner = ActionRunner([Action(name="wpa", file=FileAction(path=str(tmp_path / "out"), template="{{ ssid }}"))])

        with pytest.raises(ActionError, match="wpa"):
            await runner.run({})

    @pytest.mark.asyncio
    async def test_unwritable_path(self, tmp_path):
        path = tmp_path / "missing" / "out"
        runner = ActionRunner([Action(name="write", file=FileAction(path=str(path), value="ssid"))])

        with pytest.raises(ActionError):
            await runner.run({"ssid": "home"})

    @pytest.mark.asyncio
    async def test_files_are_written_off_the_event_loop(self, tmp_path, monkeypatch):
        offloaded = []
        to_thread = asyncio.to_thread

        async def recording_to_thread(func, /, *args, **kwargs):
            offloaded.append(func.__name__)
            return await to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
        runner = ActionRunner(
            [
                Action(name="hostname", file=FileAction(path=str(tmp_path / "hostname"), value="name")),
                Action(name="motd", file=FileAction(path=str(tmp_path / "motd"), template="Hello {{ name }}")),
            ]
        )

        await runner.run({"name": "sensor-01"})

        assert offloaded == ["write_text", "write_text"]
        assert (tmp_path / "motd").read_text() == "Hello sensor-01"
