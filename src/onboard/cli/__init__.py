"""Terminal user interface for the wizard."""

from .wizard import WizardConsole, render_checks, watch_checks

__all__ = ["WizardConsole", "render_checks", "watch_checks"]
