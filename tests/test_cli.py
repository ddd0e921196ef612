import pytest

from mac_setup.cli import EXIT_FAILED, EXIT_INTERRUPTED, EXIT_OK, main

from conftest import FakeRunner


def make_environ(home, *, ostype="darwin23", shell="/bin/zsh"):
    return {"OSTYPE": ostype, "SHELL": shell, "HOME": str(home), "PATH": "/usr/bin:/bin"}


def daemon_running(name):
    return name == "oahd"


def test_full_run_exits_zero_and_prints_summary(tmp_path, reporter, output):
    runner = FakeRunner(brew="/opt/homebrew/bin/brew")
    code = main([], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path))

    text = output.getvalue()
    assert code == EXIT_OK
    assert "[SUCCESS] Setup completed successfully!" in text
    assert "Google Chrome" in text and "GitHub Desktop" in text
    assert "source ~/.zshrc" in text


def test_wrong_platform_exits_one_without_side_effects(tmp_path, reporter, output):
    runner = FakeRunner(brew="/opt/homebrew/bin/brew")
    code = main(
        [], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path, ostype="linux-gnu")
    )
    assert code == EXIT_FAILED
    assert runner.calls == []
    assert "[ERROR] This script is designed for macOS only" in output.getvalue()
    assert not (tmp_path / ".zshrc").exists()


def test_rosetta_failure_exits_one(tmp_path, reporter, output):
    runner = FakeRunner(brew="/opt/homebrew/bin/brew", failing=["softwareupdate"])
    code = main([], runner=runner, reporter=reporter, probe=lambda name: False, environ=make_environ(tmp_path))
    assert code == EXIT_FAILED
    assert runner.commands_containing("brew") == []
    assert "[ERROR] Failed to install Rosetta 2" in output.getvalue()


def test_homebrew_bootstrap_failure_exits_one(tmp_path, reporter):
    runner = FakeRunner(failing=["curl"])
    code = main([], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path))
    assert code == EXIT_FAILED
    assert runner.commands_containing("--cask") == []


def test_cask_and_profile_problems_keep_exit_zero(tmp_path, reporter, output):
    runner = FakeRunner(brew="/opt/homebrew/bin/brew", failing=["--cask google-chrome", "--cask github"])
    code = main(
        [], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path, shell="/bin/fish")
    )
    text = output.getvalue()
    assert code == EXIT_OK
    assert len(runner.commands_containing("--cask")) == 6
    assert "Retry with: brew install --cask google-chrome github" in text
    assert "[WARNING] Unknown shell: /bin/fish" in text


def test_extra_arguments_are_ignored(tmp_path, reporter):
    runner = FakeRunner(brew="/opt/homebrew/bin/brew")
    code = main(
        ["--verbose", "extra"], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path)
    )
    assert code == EXIT_OK


class InterruptingRunner(FakeRunner):
    def run(self, argv, *, env=None, capture=False):
        if "--cask" in argv:
            raise KeyboardInterrupt
        return super().run(argv, env=env, capture=capture)


def test_interrupt_exits_130(tmp_path, reporter, output):
    runner = InterruptingRunner(brew="/opt/homebrew/bin/brew")
    code = main([], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path))
    assert code == EXIT_INTERRUPTED
    assert "[ERROR] Interrupted" in output.getvalue()
    assert not (tmp_path / ".zshrc").exists()


def test_help_prints_usage(tmp_path, reporter, capsys):
    runner = FakeRunner()
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"], runner=runner, reporter=reporter, probe=daemon_running, environ=make_environ(tmp_path))
    assert excinfo.value.code == 0
    assert "usage: mac-setup" in capsys.readouterr().out
    assert runner.calls == []


def test_summary_shows_rosetta_outcome(tmp_path, reporter, output):
    runner = FakeRunner(brew="/opt/homebrew/bin/brew")
    main([], runner=runner, reporter=reporter, probe=lambda name: False, environ=make_environ(tmp_path))
    rosetta_line = next(line for line in output.getvalue().splitlines() if "Rosetta 2 (Apple" in line)
    assert rosetta_line.rstrip().endswith("installed")
    assert "already" not in rosetta_line
