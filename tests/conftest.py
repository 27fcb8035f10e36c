"""Pytest fixtures for tak tests"""
import io
import tempfile
from pathlib import Path

import git
import pytest
from rich.console import Console

from tak.config import Config
from tak.services.command_runner import CommandResult, CommandRunner
from tak.services.display_service import DisplayService


class FakeRunner(CommandRunner):
    """CommandRunner stand-in for lsof, dropdb, mise and mix.

    Args:
        listening: Mapping of port -> PID that lsof reports as bound
        available: Programs which() should find
        failing: Command prefixes (e.g. "dropdb", "mix ecto.setup") that exit 1
    """

    def __init__(self, listening=None, available=("git",), failing=()):
        self.listening = dict(listening or {})
        self.available = set(available)
        self.failing = set(failing)
        self.calls = []

    def run(self, args, cwd=None, env=None):
        args = list(args)
        self.calls.append((args, cwd, env))
        command = " ".join(args)

        for prefix in self.failing:
            if command.startswith(prefix):
                return CommandResult(args, 1, "", f"{prefix}: simulated failure")

        if args[0] == "lsof":
            port = int(args[-1].lstrip(":"))
            pid = self.listening.get(port)
            if pid is None:
                return CommandResult(args, 1)
            if args[1] == "-ti":
                return CommandResult(args, 0, f"{pid}\n")
            return CommandResult(args, 0, f"COMMAND PID\nbeam.smp {pid} TCP *:{port} (LISTEN)\n")

        return CommandResult(args, 0)

    def which(self, program):
        return f"/usr/bin/{program}" if program in self.available else None

    def commands(self):
        """Commands run so far, as strings."""
        return [" ".join(args) for args, _, _ in self.calls]

    def ran(self, prefix):
        return any(command.startswith(prefix) for command in self.commands())


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository laid out like a Phoenix project."""
    repo_path = temp_dir / "myapp"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    (repo_path / "mix.exs").write_text(
        "defmodule Myapp.MixProject do\n"
        "  use Mix.Project\n\n"
        "  def project do\n"
        "    [app: :myapp, version: \"0.1.0\"]\n"
        "  end\nend\n"
    )
    (repo_path / ".gitignore").write_text(
        "/trees/\nconfig/dev.local.exs\nmise.local.toml\n.env\n"
    )
    (repo_path / "config").mkdir()
    (repo_path / "config" / "dev.exs").write_text(
        'import Config\n\nimport_config "dev.local.exs"\n'
    )
    repo.index.add(["mix.exs", ".gitignore", "config/dev.exs"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except git.exc.GitCommandError:
        pass

    yield repo

    repo.close()


@pytest.fixture
def repo_path(git_repo):
    return git_repo.working_dir


@pytest.fixture
def config():
    """Config with the default names for the myapp test project."""
    return Config(app_name="myapp")


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def display():
    """DisplayService writing to in-memory buffers."""
    out = Console(file=io.StringIO(), width=200, color_system=None)
    err = Console(file=io.StringIO(), width=200, color_system=None)
    return DisplayService(out=out, err=err)


@pytest.fixture
def output(display):
    """Callable returning everything the display printed, stdout then stderr."""
    def read():
        return display.console.file.getvalue() + display.err_console.file.getvalue()
    return read
