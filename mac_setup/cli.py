"""Entry point for the mac-setup command line tool."""

from __future__ import annotations

import argparse
from typing import Mapping, Optional, Sequence

from .environment import is_process_running, read_host_config
from .formatting import reload_hint, render_summary
from .provision import ProcessProbe, ProvisionError, provision
from .reporting import Reporter
from .runner import CommandRunner, SubprocessRunner

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    runner: Optional[CommandRunner] = None,
    reporter: Optional[Reporter] = None,
    probe: ProcessProbe = is_process_running,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    parser = argparse.ArgumentParser(
        prog="mac-setup",
        description="Set up a new Mac: Rosetta 2, Homebrew, everyday apps and the shell profile.",
    )
    # Extra arguments are accepted and ignored.
    parser.parse_known_args(argv)

    reporter = reporter or Reporter()
    runner = runner or SubprocessRunner()
    config = read_host_config(environ)

    reporter.info("Starting macOS setup script...")
    reporter.rule()
    try:
        report = provision(config, runner, probe, reporter)
    except ProvisionError as exc:
        reporter.error(str(exc))
        return EXIT_FAILED
    except KeyboardInterrupt:
        reporter.error("Interrupted")
        return EXIT_INTERRUPTED

    reporter.rule()
    reporter.success("Setup completed successfully!")
    for renderable in render_summary(report):
        reporter.console.print(renderable)
    reporter.info(reload_hint())
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
