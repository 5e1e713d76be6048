"""Interactive terminal wizard.

Prompts for every configured value, submits them to the device and then
renders the onboarding checks live until they settle.
"""

import asyncio

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Prompt
from rich.spinner import Spinner
from rich.table import Table

from onboard.checks import build_onboarding_checks
from onboard.client import OnboardTransport
from onboard.configuration import WizardConfiguration
from onboard.constants import START_STEP
from onboard.settings import Settings
from onboard.verification import CheckGroup, CheckGroupSnapshot, GroupState, RunState
from onboard.wizard import SubmissionState, WizardState

BACK = "<"
# Entering the escaped sentinel stores a literal "<"
ESCAPED_BACK = "\\" + BACK
REFRESH_INTERVAL = 0.25


def _row_style(weight: float) -> str:
    if weight >= 1:
        return "bold"
    if weight >= 0.5:
        return ""
    return "dim"


def render_checks(snapshot: CheckGroupSnapshot) -> Table:
    """Render the exposed checks, fading out the older ones.

    Units whose display weight dropped to zero are left out.
    """
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(width=2)
    table.add_column()
    table.add_column(justify="right")

    for unit in snapshot.units:
        if unit.weight <= 0:
            continue
        if unit.state == RunState.SUCCEEDED:
            status = "[green]✓[/green]"
        elif unit.state == RunState.FAILED:
            status = "[red]✗[/red]"
        else:
            status = Spinner("dots")
        label = unit.label if unit.failure_reason is None else f"{unit.label}: [red]{unit.failure_reason}[/red]"
        table.add_row(status, label, f"[dim]{unit.attempts}/{unit.max_attempts}[/dim]", style=_row_style(unit.weight))
    return table


async def watch_checks(group: CheckGroup, console: Console) -> GroupState:
    """Render ``group`` live until it settles.

    Returns:
        GroupState: The terminal state of the group
    """
    settled = asyncio.ensure_future(group.wait())
    with Live(render_checks(group.snapshot()), console=console, refresh_per_second=8) as live:
        while not settled.done():
            await asyncio.wait({settled}, timeout=REFRESH_INTERVAL)
            live.update(render_checks(group.snapshot()))
    return settled.result()


class WizardConsole:
    """Drives a WizardState from the terminal."""

    def __init__(
        self,
        transport: OnboardTransport,
        configuration: WizardConfiguration,
        settings: Settings,
        console: Console | None = None,
    ):
        self.console = console or Console()
        self.state = WizardState(
            configuration.values,
            transport.onboard,
            lambda values: build_onboarding_checks(configuration, values, transport, settings),
        )

    async def run(self) -> bool:
        """Run the wizard to completion.

        Returns:
            bool: True if every check succeeded
        """
        self.console.print(
            Panel(
                f"Enter the {len(self.state.fields)} values below. Type [bold]{BACK}[/bold] to go back, "
                f"[bold]{ESCAPED_BACK}[/bold] to enter a literal {BACK}.",
                title="Onboard",
            )
        )

        while True:
            if self.state.current_step == START_STEP:
                self.state.advance()
            elif self.state.on_submit_step:
                if not await self._submit_step():
                    continue
                return await self._verify()
            else:
                self._field_step()

    def _field_step(self) -> None:
        index = self.state.steps.index(self.state.current_step) - 1
        field = self.state.fields[index]
        current = self.state.value(index)

        answer = Prompt.ask(
            field.description or field.name,
            console=self.console,
            password=field.secret,
            default=current,
            show_default=bool(current) and not field.secret,
        )
        if answer == BACK:
            self.state.back()
            return
        if answer == ESCAPED_BACK:
            answer = BACK
        self.state.set_field_value(index, answer)
        if not self.state.advance():
            self.console.print("[red]A value is required[/red]")

    async def _submit_step(self) -> bool:
        self._print_summary()
        answer = Prompt.ask("Submit these values?", console=self.console, choices=["y", BACK], default="y")
        if answer == BACK:
            self.state.back()
            return False

        with self.console.status("Submitting..."):
            accepted = await self.state.submit()
        if not accepted:
            if self.state.submission == SubmissionState.FAILED:
                self.console.print(f"[red]Submission failed: {self.state.submission_error}[/red]")
            return False
        self.console.print("[green]Values accepted[/green]\n")
        return True

    async def _verify(self) -> bool:
        group = self.state.check_group
        if group is None:
            return False
        state = await watch_checks(group, self.console)
        if state == GroupState.SUCCEEDED:
            self.console.print("\n[green]Onboarding complete![/green]")
            return True
        self.console.print("\n[red]Onboarding failed[/red]")
        return False

    def _print_summary(self) -> None:
        table = Table(title="Values")
        table.add_column("Name")
        table.add_column("Value")
        for field in self.state.snapshot().fields:
            table.add_row(field.description or field.name, field.value)
        self.console.print(table)
