"""CLI tests for branchflow -- all commands via Click's CliRunner.

Each test runs inside runner.isolated_filesystem() so the config file is
read from and written to a throwaway directory. Git is always the FakeGit
backend injected through the context object.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from branchflow.cli import cli
from branchflow.config_store import CONFIG_FILE_NAME
from branchflow.models.config import DEFAULT_CONFIG
from tests.conftest import FakeGit, ScriptedPrompter


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


def _write_config(path: str = CONFIG_FILE_NAME, **overrides) -> None:
    data = {**DEFAULT_CONFIG, **overrides}
    Path(path).write_text(json.dumps(data), encoding="utf-8")


def _invoke(runner, fake, args, *, prompter=None, input=None):
    obj = {"backend": fake}
    if prompter is not None:
        obj["prompter"] = prompter
    return runner.invoke(cli, args, obj=obj, input=input)


def _finish_repo(branch: str, **kwargs) -> FakeGit:
    branches = {"main": "c0", "develop": "c1", branch: "c2"}
    return FakeGit(branches=branches, current=branch, remote=("main", "develop"), **kwargs)


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------

class TestHelp:
    def test_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ["init", "switch", "feature:start", "feature:finish", "release:start",
                     "release:finish", "bugfix:start", "bugfix:finish", "hotfix:start",
                     "hotfix:finish"]:
            assert name in result.output

    def test_release_metavar(self, runner):
        result = runner.invoke(cli, ["release:start", "--help"])
        assert result.exit_code == 0
        assert "VERSION" in result.output

    def test_name_required(self, runner):
        result = runner.invoke(cli, ["feature:start"], obj={"backend": FakeGit()})
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

class TestInitCommand:
    def test_init_yes(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            result = _invoke(runner, fake, ["init", "--yes"])
            assert result.exit_code == 0, result.output
            assert "initialized" in result.output
            assert json.loads(Path(CONFIG_FILE_NAME).read_text()) == DEFAULT_CONFIG

    def test_init_wizard_reads_terminal(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            # main, develop, staging?, push?, create?, create on remote?
            result = _invoke(runner, fake, ["init"], input="trunk\ndev\nn\ny\nn\nn\n")
            assert result.exit_code == 0, result.output
            saved = json.loads(Path(CONFIG_FILE_NAME).read_text())
            assert saved["mainBranch"] == "trunk"
            assert saved["developBranch"] == "dev"
            assert saved["useStaging"] is False

    def test_init_wizard_reprompts_invalid_name(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            result = _invoke(
                runner, fake, ["init"], input="bad name\ntrunk\n\nn\ny\nn\nn\n"
            )
            assert result.exit_code == 0, result.output
            assert "cannot contain spaces" in result.output
            assert json.loads(Path(CONFIG_FILE_NAME).read_text())["mainBranch"] == "trunk"

    def test_init_overwrite_declined(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config(mainBranch="trunk")
            result = _invoke(runner, fake, ["init"], prompter=ScriptedPrompter(confirms=[False]))
            assert result.exit_code == 1
            assert "Initialization cancelled." in result.output
            assert json.loads(Path(CONFIG_FILE_NAME).read_text())["mainBranch"] == "trunk"

    def test_init_custom_config_path(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            result = _invoke(runner, fake, ["--config", "flow.json", "init", "--yes"])
            assert result.exit_code == 0, result.output
            assert Path("flow.json").is_file()
            assert not Path(CONFIG_FILE_NAME).exists()


# ---------------------------------------------------------------------------
# start / finish
# ---------------------------------------------------------------------------

class TestLifecycleCommands:
    def test_feature_start(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:start", "login"])
            assert result.exit_code == 0, result.output
            assert "Done" in result.output
            assert "git checkout -b feature/login develop" in result.output
            assert fake.current == "feature/login"

    def test_start_existing_branch_fails(self, runner):
        fake = FakeGit(branches={"main": "c0", "develop": "c1", "feature/login": "c1"})
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:start", "login"])
            assert result.exit_code == 1
            assert "Branch already exists: feature/login" in result.output

    def test_name_with_space_fails(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:start", "my", "feature"])
            assert result.exit_code == 1
            assert "cannot contain spaces" in result.output
            assert fake.mutations() == []

    def test_release_bad_version(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["release:start", "1.2"])
            assert result.exit_code == 1
            assert "Invalid version" in result.output

    def test_missing_config_declined(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            result = _invoke(
                runner, fake, ["feature:start", "login"], prompter=ScriptedPrompter(confirms=[False])
            )
            assert result.exit_code == 1
            assert "Run 'branchflow init' first." in result.output
            assert fake.calls == []

    def test_invalid_config_file(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config(useStaging="yes")
            result = _invoke(runner, fake, ["feature:start", "login"])
            assert result.exit_code == 1
            assert "Must be a boolean" in result.output

    def test_undecodable_config_file(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            Path(CONFIG_FILE_NAME).write_bytes(b'{"mainBranch": "m\xff"}')
            result = _invoke(runner, fake, ["feature:start", "x"])
            assert result.exit_code == 1
            assert "Invalid configuration file" in result.output
            assert fake.calls == []

    def test_feature_finish(self, runner):
        fake = _finish_repo("feature/login")
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:finish", "login"])
            assert result.exit_code == 0, result.output
            assert "feature/login" not in fake.branches

    def test_release_finish(self, runner):
        fake = _finish_repo("release/1.0.0")
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["release:finish", "1.0.0"])
            assert result.exit_code == 0, result.output
            assert "Congratulations on release v1.0.0" in result.output
            assert fake.tags == ["v1.0.0"]

    def test_finish_no_commits(self, runner):
        fake = FakeGit(branches={"main": "c0", "develop": "c1", "bugfix/x": "c1"})
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["bugfix:finish", "x"])
            assert result.exit_code == 1
            assert "No commits yet on bugfix/x" in result.output

    def test_finish_conflict(self, runner):
        fake = _finish_repo("feature/login", unmerged=["a.txt"])
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:finish", "login"])
            assert result.exit_code == 1
            assert "Merge conflicts detected in:" in result.output
            assert "a.txt" in result.output
            assert fake.mutations() == []

    def test_finish_command_failure(self, runner):
        fake = _finish_repo("feature/login")
        fake.fail("push origin develop", stderr="rejected\n")
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:finish", "login"])
            assert result.exit_code == 1
            assert "Command failed: git push origin develop" in result.output
            assert "Last successful command:" in result.output
            assert "git merge --no-ff --no-edit feature/login" in result.output

    def test_failure_before_any_command(self, runner):
        fake = FakeGit()
        fake.fail("checkout -b", stderr="fatal: cannot lock ref\n", exit_code=128)
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["feature:start", "login"])
            assert result.exit_code == 1
            assert "No command was executed before the failure." in result.output

    def test_debug_dry_run(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config(debug=True)
            result = _invoke(runner, fake, ["hotfix:start", "urgent"])
            assert result.exit_code == 0, result.output
            assert "Debug mode enabled, no command was executed." in result.output
            assert "git checkout -b hotfix/urgent main" in result.output
            assert fake.mutations() == []


# ---------------------------------------------------------------------------
# switch
# ---------------------------------------------------------------------------

class TestSwitchCommand:
    def test_switch(self, runner):
        fake = FakeGit(remote=("main",))
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["switch", "main"])
            assert result.exit_code == 0, result.output
            assert "Switched to branch main" in result.output
            assert fake.mutations() == ["checkout main", "pull origin main"]

    def test_switch_unknown(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["switch", "nope"])
            assert result.exit_code == 1
            assert "Branch does not exist: nope" in result.output

    def test_verbose_flag(self, runner):
        fake = FakeGit()
        with runner.isolated_filesystem():
            _write_config()
            result = _invoke(runner, fake, ["-vv", "switch", "develop"])
            assert result.exit_code == 0, result.output
            assert "Already on 'develop'" in result.output
