import io
from pathlib import Path

import pytest
from rich.console import Console

from mac_setup.environment import HostConfig
from mac_setup.reporting import Reporter
from mac_setup.runner import CommandResult


class FakeRunner:
    """Records every command and answers from canned exit codes."""

    def __init__(self, *, brew=None, failing=(), stdout=None):
        self.brew = brew
        self.failing = list(failing)
        self.stdout = stdout or {}
        self.calls = []

    def run(self, argv, *, env=None, capture=False):
        argv = list(argv)
        self.calls.append(argv)
        joined = " ".join(argv)
        returncode = 1 if any(fragment in joined for fragment in self.failing) else 0
        stdout = next((out for fragment, out in self.stdout.items() if fragment in joined), "")
        return CommandResult(argv=argv, returncode=returncode, stdout=stdout)

    def which(self, name, search_path):
        if name == "brew":
            if self.brew:
                return self.brew
            for directory in search_path:
                if directory == "/opt/homebrew/bin":
                    return "/opt/homebrew/bin/brew"
        return None

    def commands_containing(self, fragment):
        return [call for call in self.calls if fragment in " ".join(call)]


def make_config(
    home: Path,
    *,
    os_type: str = "darwin23",
    shell: str = "/bin/zsh",
    search_path=None,
) -> HostConfig:
    return HostConfig(
        os_type=os_type,
        shell=shell,
        home=home,
        search_path=list(search_path or ["/usr/bin", "/bin"]),
    )


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def reporter(output):
    return Reporter(Console(file=output, width=200, color_system=None, highlight=False))
