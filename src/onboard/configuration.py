"""Onboarding configuration: values to collect, checks to verify, actions to run.

Configuration is read once at startup from one or more YAML files and passed
explicitly to whatever needs it (the device API, the check list builder and
the wizard). Several files can be combined; their ``values``, ``checks`` and
``actions`` lists are concatenated in lexicographic order of file name.

Example:
    ```yaml
    values:
      - name: ssid
        description: Wi-Fi network name
      - name: psk
        description: Wi-Fi password
        secret: true
    checks:
      - name: join
        systemd:
          unit: join-cluster.service
          description: Joining the cluster
    actions:
      - name: wpa
        file:
          path: /etc/wpa_supplicant/wpa_supplicant-wlan0.conf
          template: |
            network={
              ssid="{{ ssid }}"
              psk="{{ psk }}"
            }
    ```
"""

import glob
import re
from enum import StrEnum
from pathlib import Path

import jinja2
import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from onboard.exceptions import ConfigurationError

VALID_NAME = re.compile(r"^[a-zA-Z_]+[a-zA-Z0-9_-]*$")
VALID_UNIT_NAME = re.compile(
    r"^([a-zA-Z0-9:._-]+@)?[a-zA-Z0-9:._-]+"
    r"(\.service|\.socket|\.device|\.mount|\.automount|\.swap|\.target|\.path|\.timer|\.slice|\.scope)$"
)
MAX_UNIT_NAME_LENGTH = 256


class SystemdCommand(StrEnum):
    """systemctl verbs an action may run."""

    START = "start"
    STOP = "stop"
    RESTART = "restart"
    ENABLE = "enable"
    DISABLE = "disable"


def _unit_name_errors(unit: str) -> list[str]:
    if not unit:
        return ["unit name cannot be empty"]
    errors = []
    if not VALID_UNIT_NAME.match(unit):
        errors.append(f"unit name {unit!r} does not match format {VALID_UNIT_NAME.pattern}")
    if len(unit.split("@")[-1]) > MAX_UNIT_NAME_LENGTH:
        errors.append(f"unit name cannot exceed {MAX_UNIT_NAME_LENGTH} characters")
    return errors


class Value(BaseModel):
    """An input gathered from the operator by the wizard."""

    name: str = ""
    description: str = ""
    secret: bool = False

    def validation_errors(self) -> list[str]:
        if not self.name:
            return ["value name cannot be empty"]
        if not VALID_NAME.match(self.name):
            return [f"value name {self.name!r} does not match format {VALID_NAME.pattern}"]
        return []


class DNSCheck(BaseModel):
    """Resolve the collected value named ``value`` with the device's resolver."""

    value: str = ""


class SystemdCheck(BaseModel):
    """Wait for a one-shot systemd unit to run to completion."""

    unit: str = ""
    description: str = ""


class Check(BaseModel):
    """A verification step run after the values were submitted."""

    model_config = {"extra": "ignore"}

    name: str = ""
    description: str = ""
    dns: DNSCheck | None = None
    systemd: SystemdCheck | None = None

    def validation_errors(self, value_names: set[str]) -> list[str]:
        if not self.name:
            return ["check name cannot be empty"]
        errors = []
        if not VALID_NAME.match(self.name):
            errors.append(f"check name {self.name!r} does not match format {VALID_NAME.pattern}")

        variants = 0
        if self.systemd is not None:
            variants += 1
            errors.extend(f"check {self.name!r}: {e}" for e in _unit_name_errors(self.systemd.unit))
        if self.dns is not None:
            variants += 1
            if not self.dns.value:
                errors.append(f"check {self.name!r}: DNS value must point at a defined value")
            elif self.dns.value not in value_names:
                errors.append(f"check {self.name!r}: DNS value {self.dns.value!r} was not found")
        if variants != 1:
            errors.append(f"check {self.name!r}: exactly one of 'dns' or 'systemd' must be specified")
        return errors


class FileAction(BaseModel):
    """Write a file from a collected value or from a Jinja2 template."""

    path: str = ""
    value: str | None = None
    template: str | None = None

    def validation_errors(self, value_names: set[str]) -> list[str]:
        if not self.path:
            return ["file path cannot be empty"]
        errors = []
        variants = 0
        if self.value is not None:
            variants += 1
            if not self.value:
                errors.append("file value must point at a defined value")
            elif self.value not in value_names:
                errors.append(f"file value {self.value!r} was not found")
        if self.template is not None:
            variants += 1
            if not self.template:
                errors.append("file template cannot be empty")
            else:
                try:
                    jinja2.Environment().parse(self.template)
                except jinja2.TemplateSyntaxError as e:
                    errors.append(f"failed to parse template: {e}")
        if variants != 1:
            errors.append("exactly one of 'value' or 'template' must be specified")
        return errors


class SystemdAction(BaseModel):
    """Run a systemctl command against a unit."""

    unit: str = ""
    command: str = ""

    def validation_errors(self) -> list[str]:
        errors = _unit_name_errors(self.unit)
        commands = [command.value for command in SystemdCommand]
        if self.command not in commands:
            errors.append(f"systemd command must be one of: {','.join(commands)}")
        return errors


class Action(BaseModel):
    """A side effect performed on the device when the values are submitted."""

    name: str = ""
    file: FileAction | None = None
    systemd: SystemdAction | None = None

    def validation_errors(self, value_names: set[str]) -> list[str]:
        if not self.name:
            return ["action name cannot be empty"]
        errors = []
        if not VALID_NAME.match(self.name):
            errors.append(f"action name {self.name!r} does not match format {VALID_NAME.pattern}")

        variants = 0
        if self.file is not None:
            variants += 1
            errors.extend(f"action {self.name!r}: {e}" for e in self.file.validation_errors(value_names))
        if self.systemd is not None:
            variants += 1
            errors.extend(f"action {self.name!r}: {e}" for e in self.systemd.validation_errors())
        if variants != 1:
            errors.append(f"action {self.name!r}: exactly one of 'file' or 'systemd' must be specified")
        return errors


class WizardConfiguration(BaseModel):
    """The part of the configuration the wizard needs: fields and checks."""

    values: list[Value] = Field(default_factory=list)
    checks: list[Check] = Field(default_factory=list)


class Configuration(BaseModel):
    """Complete onboarding configuration."""

    actions: list[Action] = Field(default_factory=list)
    checks: list[Check] = Field(default_factory=list)
    values: list[Value] = Field(default_factory=list)

    def validate_configuration(self) -> None:
        """Validate every entry, collecting all problems.

        Raises:
            ConfigurationError: If any entry is invalid or a name repeats
        """
        value_names = {value.name for value in self.values}
        errors: list[str] = []

        errors.extend(self._entry_errors("action", self.actions, lambda a: a.validation_errors(value_names)))
        errors.extend(self._entry_errors("check", self.checks, lambda c: c.validation_errors(value_names)))
        errors.extend(self._entry_errors("value", self.values, lambda v: v.validation_errors()))

        if errors:
            raise ConfigurationError(errors)

    @staticmethod
    def _entry_errors(kind: str, entries, validate) -> list[str]:
        errors = []
        seen: set[str] = set()
        for entry in entries:
            errors.extend(validate(entry))
            if entry.name in seen:
                errors.append(f"{kind} {entry.name!r} appears more than once")
            seen.add(entry.name)
        return errors

    def find_value(self, name: str) -> int | None:
        """Return the index of the value called ``name``, or None."""
        return next((i for i, value in enumerate(self.values) if value.name == name), None)

    def wizard_view(self) -> WizardConfiguration:
        """Return the fields and checks, without the device-side actions."""
        return WizardConfiguration(values=self.values, checks=self.checks)

    def extend(self, other: "Configuration") -> None:
        """Append the entries of ``other`` to this configuration."""
        self.actions.extend(other.actions)
        self.checks.extend(other.checks)
        self.values.extend(other.values)


def parse_configuration(data: dict | None, source: str = "<data>") -> Configuration:
    """Parse one configuration document without cross-entry validation.

    Args:
        data: Parsed YAML document (None for an empty file)
        source: Name of the document used in error messages

    Raises:
        ConfigurationError: If the document does not have the expected shape
    """
    try:
        return Configuration.model_validate(data or {})
    except ValidationError as e:
        errors = [f"{source}: {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigurationError(errors) from e


def resolve_paths(patterns: list[str]) -> list[Path]:
    """Expand glob patterns and sort the matches by file name."""
    paths: list[Path] = []
    for pattern in patterns:
        paths.extend(Path(match) for match in glob.glob(pattern))
    return sorted(paths, key=lambda p: p.name)


def load_configuration(patterns: list[str]) -> Configuration:
    """Load, merge and validate configuration files.

    Args:
        patterns: File paths or glob patterns

    Returns:
        Configuration: The merged, validated configuration

    Raises:
        ConfigurationError: If a file cannot be read or the result is invalid
    """
    configuration = Configuration()
    for path in resolve_paths(patterns):
        logger.debug(f"Loading configuration from {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError([f"failed to read file {str(path)!r}: {e}"]) from e
        except yaml.YAMLError as e:
            raise ConfigurationError([f"failed to read YAML from file {str(path)!r}: {e}"]) from e
        configuration.extend(parse_configuration(data, str(path)))

    configuration.validate_configuration()
    logger.info(
        f"Loaded configuration: {len(configuration.values)} values, "
        f"{len(configuration.checks)} checks, {len(configuration.actions)} actions"
    )
    return configuration
