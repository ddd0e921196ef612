"""Run external commands behind a small interface that tests can replace."""

from __future__ import annotations

from dataclasses import dataclass
import os
import shutil
import subprocess
from typing import List, Mapping, Optional, Protocol, Sequence

# Exit statuses a shell reports for a command it cannot find or cannot execute.
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


@dataclass(frozen=True)
class CommandResult:
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def run(
        self,
        argv: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        capture: bool = False,
    ) -> CommandResult:
        ...

    def which(self, name: str, search_path: Sequence[str]) -> Optional[str]:
        ...


class SubprocessRunner:
    """Blocking ``subprocess`` runner.

    Output goes straight to the terminal unless ``capture`` is set, so that
    sudo and the Homebrew installer can prompt the user.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        capture: bool = False,
    ) -> CommandResult:
        argv_list = list(argv)
        try:
            proc = subprocess.run(
                argv_list,
                env=dict(env) if env is not None else None,
                text=True,
                errors="replace",
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
            )
        except FileNotFoundError as exc:
            return CommandResult(argv=argv_list, returncode=COMMAND_NOT_FOUND, stderr=str(exc))
        except OSError as exc:
            return CommandResult(argv=argv_list, returncode=COMMAND_NOT_EXECUTABLE, stderr=str(exc))
        return CommandResult(
            argv=argv_list,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

    def which(self, name: str, search_path: Sequence[str]) -> Optional[str]:
        return shutil.which(name, path=os.pathsep.join(search_path))
