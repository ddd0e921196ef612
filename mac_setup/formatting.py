"""Render the end-of-run summary."""

from __future__ import annotations

from typing import List

from rich import box
from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table

from .provision import CompatibilityLayerAction, PackageManagerAction, ProfileStatus, ProvisionReport

_COMPATIBILITY_LAYER_NOTES = {
    CompatibilityLayerAction.ALREADY_INSTALLED: "already installed",
    CompatibilityLayerAction.INSTALLED: "installed",
    None: "not checked",
}

_PACKAGE_MANAGER_NOTES = {
    PackageManagerAction.INSTALLED: "installed",
    PackageManagerAction.UPDATED: "already installed, updated",
    PackageManagerAction.UPDATE_FAILED: "already installed, update failed",
}

_PROFILE_NOTES = {
    ProfileStatus.ADDED: "activation added",
    ProfileStatus.ALREADY_PRESENT: "already configured",
    ProfileStatus.UNKNOWN_SHELL: "unknown shell, add Homebrew to PATH manually",
    ProfileStatus.FAILED: "could not be written",
}


def render_summary(report: ProvisionReport) -> List[RenderableType]:
    renderables: List[RenderableType] = []

    components = Table(title="Installed components", box=box.SIMPLE_HEAD, show_header=False)
    components.add_column("Component", style="bold")
    components.add_column("Status")
    components.add_row("Homebrew package manager", _PACKAGE_MANAGER_NOTES[report.package_manager])
    components.add_row(
        "Rosetta 2 (Apple Silicon compatibility)", _COMPATIBILITY_LAYER_NOTES[report.compatibility_layer]
    )
    if report.profile is not None:
        location = str(report.profile.path) if report.profile.path else "-"
        components.add_row("Shell profile", f"{_PROFILE_NOTES[report.profile.status]} ({location})")
    renderables.append(components)

    apps = Table(title="Applications", box=box.SIMPLE_HEAD)
    apps.add_column("Application", style="bold")
    apps.add_column("Cask")
    apps.add_column("Result", justify="right")
    for result in report.applications:
        status = "[green]✓ installed[/green]" if result.ok else f"[red]✗ exit {result.returncode}[/red]"
        apps.add_row(result.app.name, result.app.cask, status)
    if not report.applications:
        apps.add_row("-", "-", "-")
    renderables.append(apps)

    if report.failed_applications:
        names = " ".join(result.app.cask for result in report.failed_applications)
        renderables.append(
            Panel(f"Retry with: brew install --cask {names}", title="Some casks failed", style="yellow")
        )
    return renderables


def reload_hint() -> str:
    return "Please restart your terminal or run 'source ~/.zshrc' (or ~/.bash_profile) to use Homebrew commands"
