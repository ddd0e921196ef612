"""Read the host environment once so provisioning steps can run in isolation."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
import sys
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import psutil


@dataclass
class HostConfig:
    os_type: str
    shell: str
    home: Path
    search_path: List[str] = field(default_factory=list)

    def command_env(self) -> Dict[str, str]:
        """Environment for child processes, with PATH rebuilt from ``search_path``."""
        env = dict(os.environ)
        env["PATH"] = os.pathsep.join(self.search_path)
        return env

    def prepend_search_path(self, *directories: str) -> None:
        for directory in reversed(directories):
            if directory in self.search_path:
                self.search_path.remove(directory)
            self.search_path.insert(0, directory)


def read_host_config(environ: Optional[Mapping[str, str]] = None) -> HostConfig:
    """Collect the OS type, login shell, home directory and PATH."""
    env = os.environ if environ is None else environ
    # OSTYPE is a bash variable and is rarely exported; fall back to the interpreter's view.
    os_type = env.get("OSTYPE") or sys.platform
    home = env.get("HOME") or str(Path.home())
    path = env.get("PATH", "")
    return HostConfig(
        os_type=os_type,
        shell=env.get("SHELL", ""),
        home=Path(home),
        search_path=[entry for entry in path.split(os.pathsep) if entry],
    )


def is_process_running(name: str) -> bool:
    """Return True if any live process is named ``name``."""
    for proc in psutil.process_iter(["name"]):
        try:
            if proc.info["name"] == name:
                return True
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return False
