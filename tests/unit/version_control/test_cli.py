"""
Unit tests for the command-line interface.

Commands run in an isolated filesystem through click's CliRunner; the
dispatch errors handled by main() are tested through its return value.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner
from tinyvcs.logging import get_logger_instance
from tinyvcs.version_control.cli import cli, main


def _run(runner: CliRunner, *args: str) -> str:
    result = runner.invoke(cli, list(args))
    assert result.exit_code == 0, result.output
    return result.output


class TestCommands:
    """Tests for individual commands."""

    def test_init_and_log(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            assert _run(runner, "init") == ""

            output = _run(runner, "log")

            assert output.startswith("===\ncommit ")
            assert "Date: Thu Jan 01 00:00:00 1970 +0000\ninitial commit\n" in output
            assert output.count("===") == 1

    def test_init_twice(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            assert _run(runner, "init") == (
                "A Gitlet version-control system already exists "
                "in the current directory.\n"
            )

    def test_not_initialized(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            for command in (["status"], ["log"], ["global-log"], ["add", "f"]):
                assert _run(runner, *command) == "Not in an initialized Gitlet directory.\n"

    def test_add_commit_status(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            Path("wug.txt").write_text("wug\n")
            _run(runner, "add", "wug.txt")

            status = _run(runner, "status")
            assert "=== Staged Files ===\nwug.txt\n" in status

            assert _run(runner, "commit", "add wug") == ""
            assert "=== Staged Files ===\n\n" in _run(runner, "status")

    def test_commit_errors(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            assert _run(runner, "commit", "nothing") == "No changes added to the commit.\n"
            Path("f.txt").write_text("f")
            _run(runner, "add", "f.txt")
            assert _run(runner, "commit") == "Please enter a commit message.\n"
            assert _run(runner, "commit", "") == "Please enter a commit message.\n"

    def test_checkout_forms(self) -> None:
        """Test the file, commit-file and branch forms of checkout."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            Path("f.txt").write_text("v1")
            _run(runner, "add", "f.txt")
            _run(runner, "commit", "v1")
            first_id = _run(runner, "find", "v1").strip()
            Path("f.txt").write_text("v2")
            _run(runner, "add", "f.txt")
            _run(runner, "commit", "v2")

            Path("f.txt").write_text("scratch")
            _run(runner, "checkout", "--", "f.txt")
            assert Path("f.txt").read_text() == "v2"

            _run(runner, "checkout", first_id[:6], "--", "f.txt")
            assert Path("f.txt").read_text() == "v1"
            _run(runner, "checkout", "--", "f.txt")

            _run(runner, "branch", "feature")
            assert _run(runner, "checkout", "feature") == ""
            assert "*feature" in _run(runner, "status")

    def test_checkout_errors(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            assert _run(runner, "checkout", "ghost") == "No such branch exists.\n"
            assert _run(runner, "checkout", "master") == (
                "No need to checkout the current branch.\n"
            )
            assert _run(runner, "checkout", "--", "f.txt") == (
                "File does not exist in that commit.\n"
            )
            assert _run(runner, "checkout", "0000000", "--", "f.txt") == (
                "No commit with that id exists.\n"
            )
            assert _run(runner, "checkout", "a", "b") == "Incorrect operands.\n"

    def test_merge_conflict_output(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            Path("f.txt").write_text("1\n")
            _run(runner, "add", "f.txt")
            _run(runner, "commit", "base")
            _run(runner, "branch", "other")
            Path("f.txt").write_text("2\n")
            _run(runner, "add", "f.txt")
            _run(runner, "commit", "current")
            _run(runner, "checkout", "other")
            Path("f.txt").write_text("3\n")
            _run(runner, "add", "f.txt")
            _run(runner, "commit", "other")
            _run(runner, "checkout", "master")

            assert _run(runner, "merge", "other") == "Encountered a merge conflict.\n"
            assert Path("f.txt").read_text() == "<<<<<<< HEAD\n2\n=======\n3\n>>>>>>>\n"
            assert "Merge: " in _run(runner, "log")

    def test_branch_commands(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            _run(runner, "branch", "feature")
            assert _run(runner, "branch", "feature") == (
                "A branch with that name already exists.\n"
            )
            assert _run(runner, "rm-branch", "master") == (
                "Cannot remove the current branch.\n"
            )
            assert _run(runner, "rm-branch", "feature") == ""
            assert _run(runner, "rm-branch", "feature") == (
                "A branch with that name does not exist.\n"
            )

    def test_find_missing(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            assert _run(runner, "find", "nope") == "Found no commit with that message.\n"

    def test_corrupted_store_exits_nonzero(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            _run(runner, "init")
            Path(".tinyvcs/repository.json").write_text("{")

            result = runner.invoke(cli, ["status"])

            assert result.exit_code == 1


class TestMain:
    """Tests for command dispatch in main()."""

    @pytest.fixture(autouse=True)
    def _drop_sinks(self):
        # main() binds a sink to the captured stderr of each test
        yield
        instance = get_logger_instance()
        if instance is not None:
            instance.close()

    def test_no_command(self, capsys) -> None:
        assert main([]) == 0
        assert capsys.readouterr().out == "Please enter a command.\n"

    def test_unknown_command(self, capsys) -> None:
        assert main(["frobnicate"]) == 0
        assert capsys.readouterr().out == "No command with that name exists.\n"

    def test_wrong_operand_count(self, capsys) -> None:
        assert main(["add"]) == 0
        assert capsys.readouterr().out == "Incorrect operands.\n"

    def test_extra_operand(self, capsys) -> None:
        assert main(["init", "extra"]) == 0
        assert capsys.readouterr().out == "Incorrect operands.\n"

    def test_runs_command(self, tmp_path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        assert main(["init"]) == 0
        assert main(["init"]) == 0
        assert "already exists" in capsys.readouterr().out
        assert (tmp_path / ".tinyvcs").is_dir()

    def test_merge_conflict_notice_printed_once(self, tmp_path, monkeypatch, capfd) -> None:
        monkeypatch.chdir(tmp_path)
        f = tmp_path / "f.txt"
        main(["init"])
        f.write_text("1\n")
        main(["add", "f.txt"])
        main(["commit", "base"])
        main(["branch", "other"])
        f.write_text("2\n")
        main(["add", "f.txt"])
        main(["commit", "current"])
        main(["checkout", "other"])
        f.write_text("3\n")
        main(["add", "f.txt"])
        main(["commit", "other"])
        main(["checkout", "master"])
        capfd.readouterr()

        assert main(["merge", "other"]) == 0

        captured = capfd.readouterr()
        assert captured.out == "Encountered a merge conflict.\n"
        assert captured.err == ""
        assert f.read_text() == "<<<<<<< HEAD\n2\n=======\n3\n>>>>>>>\n"
