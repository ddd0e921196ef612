"""Provision a fresh Mac: Rosetta 2, Homebrew, a fixed set of casks and the shell profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .environment import HostConfig
from .reporting import Reporter
from .runner import CommandRunner

TARGET_OS_PREFIX = "darwin"
ROSETTA_PROCESS = "oahd"
ROSETTA_INSTALL_CMD = ["sudo", "softwareupdate", "--install-rosetta", "--agree-to-license"]
HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
HOMEBREW_PREFIX = "/opt/homebrew"
HOMEBREW_BIN_DIRS = (f"{HOMEBREW_PREFIX}/bin", f"{HOMEBREW_PREFIX}/sbin")
PROFILE_MARKER = "brew shellenv"
PROFILE_COMMENT = "# Add Homebrew to PATH"
PROFILE_ACTIVATION = f'eval "$({HOMEBREW_PREFIX}/bin/brew shellenv)"'

ProcessProbe = Callable[[str], bool]


class ProvisionError(Exception):
    """A step failed and the run cannot continue."""


class PlatformError(ProvisionError):
    pass


class InstallError(ProvisionError):
    pass


@dataclass(frozen=True)
class Application:
    cask: str
    name: str


INSTALLATION_PLAN = (
    Application("google-chrome", "Google Chrome"),
    Application("1password", "1Password"),
    Application("visual-studio-code", "VS Code"),
    Application("slack", "Slack"),
    Application("linear-linear", "Linear"),
    Application("github", "GitHub Desktop"),
)


@dataclass(frozen=True)
class AppInstallResult:
    app: Application
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CompatibilityLayerAction(str, Enum):
    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"


class PackageManagerAction(str, Enum):
    INSTALLED = "installed"
    UPDATED = "updated"
    UPDATE_FAILED = "update_failed"


class ProfileStatus(str, Enum):
    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    UNKNOWN_SHELL = "unknown_shell"
    FAILED = "failed"


@dataclass(frozen=True)
class ProfilePatchResult:
    status: ProfileStatus
    path: Optional[Path] = None


@dataclass
class ProvisionReport:
    package_manager: PackageManagerAction
    applications: List[AppInstallResult] = field(default_factory=list)
    profile: Optional[ProfilePatchResult] = None
    compatibility_layer: Optional[CompatibilityLayerAction] = None

    @property
    def failed_applications(self) -> List[AppInstallResult]:
        return [result for result in self.applications if not result.ok]


def check_platform(config: HostConfig, reporter: Reporter) -> None:
    if not config.os_type.startswith(TARGET_OS_PREFIX):
        raise PlatformError("This script is designed for macOS only")
    reporter.success("Running on macOS")


def ensure_compatibility_layer(
    config: HostConfig, runner: CommandRunner, probe: ProcessProbe, reporter: Reporter
) -> CompatibilityLayerAction:
    """Install Rosetta 2 unless its translation daemon is already running."""
    reporter.info("Installing Rosetta 2 for Apple Silicon compatibility...")
    if probe(ROSETTA_PROCESS):
        reporter.success("Rosetta 2 is already installed")
        return CompatibilityLayerAction.ALREADY_INSTALLED
    result = runner.run(ROSETTA_INSTALL_CMD, env=config.command_env())
    if not result.ok:
        raise InstallError("Failed to install Rosetta 2")
    reporter.success("Rosetta 2 installed successfully")
    return CompatibilityLayerAction.INSTALLED


def ensure_package_manager(
    config: HostConfig, runner: CommandRunner, reporter: Reporter
) -> PackageManagerAction:
    """Update Homebrew if present, otherwise run the official bootstrap script.

    After a fresh install the Homebrew prefix is prepended to
    ``config.search_path`` so later steps can find ``brew``.
    """
    reporter.info("Checking for Homebrew installation...")
    brew = runner.which("brew", config.search_path)
    if brew:
        reporter.success("Homebrew is already installed")
        reporter.info("Updating Homebrew...")
        result = runner.run([brew, "update"], env=config.command_env())
        if not result.ok:
            reporter.warning(f"Homebrew update failed (exit {result.returncode}); continuing")
            return PackageManagerAction.UPDATE_FAILED
        return PackageManagerAction.UPDATED

    reporter.info("Installing Homebrew...")
    fetched = runner.run(["curl", "-fsSL", HOMEBREW_INSTALL_URL], env=config.command_env(), capture=True)
    if not fetched.ok or not fetched.stdout.strip():
        raise InstallError("Failed to install Homebrew: could not download the install script")
    installed = runner.run(["/bin/bash", "-c", fetched.stdout], env=config.command_env())
    if not installed.ok:
        raise InstallError("Failed to install Homebrew")
    reporter.success("Homebrew installed successfully")
    config.prepend_search_path(*HOMEBREW_BIN_DIRS)
    return PackageManagerAction.INSTALLED


def install_applications(
    config: HostConfig,
    runner: CommandRunner,
    reporter: Reporter,
    plan: Sequence[Application] = INSTALLATION_PLAN,
) -> List[AppInstallResult]:
    """Install every cask in ``plan``; a failed cask never stops the batch."""
    reporter.info("Installing Applications...")
    brew = runner.which("brew", config.search_path) or "brew"
    results: List[AppInstallResult] = []
    for app in plan:
        outcome = runner.run([brew, "install", "--cask", app.cask], env=config.command_env())
        if not outcome.ok:
            reporter.warning(f"Could not install {app.name} ({app.cask}), exit {outcome.returncode}")
        results.append(AppInstallResult(app=app, returncode=outcome.returncode))
    reporter.success("Applications installation completed")
    return results


def profile_path_for_shell(shell: str, home: Path) -> Optional[Path]:
    if shell.endswith("/zsh"):
        return home / ".zshrc"
    if shell.endswith("/bash"):
        return home / ".bash_profile"
    return None


def patch_shell_profile(config: HostConfig, reporter: Reporter) -> ProfilePatchResult:
    """Append the Homebrew activation block to the login shell's profile, once."""
    reporter.info("Setting up shell profile for Homebrew...")
    profile = profile_path_for_shell(config.shell, config.home)
    if profile is None:
        reporter.warning(
            f"Unknown shell: {config.shell}. You may need to manually add Homebrew to your PATH"
        )
        return ProfilePatchResult(ProfileStatus.UNKNOWN_SHELL)

    try:
        if PROFILE_MARKER in _read_profile(profile):
            reporter.success(f"Homebrew already configured in {profile}")
            return ProfilePatchResult(ProfileStatus.ALREADY_PRESENT, profile)
        with profile.open("a", encoding="utf-8") as handle:
            handle.write(f"\n{PROFILE_COMMENT}\n{PROFILE_ACTIVATION}\n")
    except OSError as exc:
        reporter.warning(f"Could not update {profile}: {exc}")
        return ProfilePatchResult(ProfileStatus.FAILED, profile)
    reporter.success(f"Added Homebrew to {profile}")
    return ProfilePatchResult(ProfileStatus.ADDED, profile)


def provision(
    config: HostConfig, runner: CommandRunner, probe: ProcessProbe, reporter: Reporter
) -> ProvisionReport:
    """Run every step in order. Fatal failures raise :class:`ProvisionError`."""
    check_platform(config, reporter)

    reporter.info("Step 1/3: Installing Rosetta 2 (if needed)...")
    rosetta = ensure_compatibility_layer(config, runner, probe, reporter)

    reporter.info("Step 2/3: Installing Homebrew...")
    action = ensure_package_manager(config, runner, reporter)

    reporter.info("Step 3/3: Installing Applications...")
    applications = install_applications(config, runner, reporter)

    profile = patch_shell_profile(config, reporter)
    return ProvisionReport(
        package_manager=action,
        applications=applications,
        profile=profile,
        compatibility_layer=rosetta,
    )


def _read_profile(profile: Path) -> str:
    try:
        return profile.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return ""
