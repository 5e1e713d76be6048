"""Running the configured actions once the values are submitted.

File actions write either a collected value or a rendered Jinja2 template;
systemd actions run a systemctl command. Actions run in configuration order
and the first failure stops the run.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path

import jinja2
from loguru import logger

from onboard.configuration import Action, FileAction, SystemdAction
from onboard.exceptions import ActionError, CommandError

from .systemctl import control_unit

ActionCallable = Callable[[Mapping[str, str]], Awaitable[None]]
UnitController = Callable[[str, str], Awaitable[None]]


class ActionRunner:
    """Compiled list of actions.

    Templates are compiled once when the runner is built, so that a broken
    template is reported at startup rather than on submission.
    """

    def __init__(self, actions: list[Action], controller: UnitController = control_unit):
        self._controller = controller
        self._environment = jinja2.Environment(keep_trailing_newline=True, undefined=jinja2.StrictUndefined)
        self._actions: list[tuple[str, ActionCallable]] = [(action.name, self._compile(action)) for action in actions]

    def __len__(self) -> int:
        return len(self._actions)

    async def run(self, values: Mapping[str, str]) -> None:
        """Run every action with the submitted values.

        Raises:
            ActionError: If an action failed; later actions are not run
        """
        for name, action in self._actions:
            logger.info(f"Running action '{name}'")
            try:
                await action(values)
            except (OSError, CommandError, jinja2.TemplateError) as e:
                logger.error(f"Action '{name}' failed: {e}")
                raise ActionError(name, str(e)) from e

    def _compile(self, action: Action) -> ActionCallable:
        if action.file is not None:
            return self._file_action(action.file)
        if action.systemd is not None:
            return self._systemd_action(action.systemd)
        raise ValueError(f"action {action.name!r} has nothing to run")

    def _file_action(self, file: FileAction) -> ActionCallable:
        path = Path(file.path)
        if file.template is not None:
            template = self._environment.from_string(file.template)

            async def write_template(values: Mapping[str, str]) -> None:
                await asyncio.to_thread(path.write_text, template.render(**values), encoding="utf-8")

            return write_template

        value_name = file.value or ""

        async def write_value(values: Mapping[str, str]) -> None:
            await asyncio.to_thread(path.write_text, values.get(value_name, ""), encoding="utf-8")

        return write_value

    def _systemd_action(self, systemd: SystemdAction) -> ActionCallable:
        async def run_systemctl(_values: Mapping[str, str]) -> None:
            await self._controller(systemd.command, systemd.unit)

        return run_systemctl
