"""
Command-line interface for tinyvcs.

Every command operates on the repository of the current directory.
Handled errors print their message and exit with status 0; a corrupted
object store is fatal and exits with status 1.

Example:
    tinyvcs init
    tinyvcs add notes.txt
    tinyvcs commit "Add notes"
    tinyvcs checkout -- notes.txt
"""

import functools
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import click
from loguru import logger

from ..config import config
from ..logging import initialize_logging
from .errors import DomainError, StoreError, UserInputError
from .reporting import format_find, format_log, format_status
from .repository import Repository

NO_COMMAND = "Please enter a command."
UNKNOWN_COMMAND = "No command with that name exists."


def _repository() -> Repository:
    return Repository(Path.cwd())


def reported(func: Callable) -> Callable:
    """Render version control errors instead of raising them."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (DomainError, UserInputError) as e:
            click.echo(str(e))
        except StoreError as e:
            logger.bind(component="cli").error(f"Repository store is corrupted: {e}")
            click.echo(f"Fatal: {e}", err=True)
            raise click.exceptions.Exit(1)
        return None

    return wrapper


class CheckoutCommand(click.Command):
    """Keeps the raw operands, since click drops a literal "--" separator."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta["raw_operands"] = list(args)
        return super().parse_args(ctx, args)


@click.group()
def cli():
    """A tiny local version-control system."""
    pass


@cli.command()
@reported
def init():
    """Create a repository in the current directory."""
    _repository().init()


@cli.command()
@click.argument("filename")
@reported
def add(filename: str):
    """Stage a file for addition."""
    _repository().add(filename)


@cli.command()
@click.argument("filename")
@reported
def rm(filename: str):
    """Unstage a file, or stage it for removal."""
    _repository().rm(filename)


@cli.command()
@click.argument("message", required=False, default="")
@reported
def commit(message: str):
    """Commit the staged changes."""
    _repository().commit(message)


@cli.command(cls=CheckoutCommand)
@click.argument("operands", nargs=-1)
@click.pass_context
@reported
def checkout(ctx: click.Context, operands: tuple):
    """
    Restore files or switch branches.

    \b
    checkout -- FILE
    checkout COMMIT_ID -- FILE
    checkout BRANCH
    """
    raw = ctx.meta.get("raw_operands", list(operands))
    repo = _repository()
    if len(raw) == 2 and raw[0] == "--":
        repo.checkout_file(raw[1])
    elif len(raw) == 3 and raw[1] == "--":
        repo.checkout_commit_file(raw[0], raw[2])
    elif len(raw) == 1 and raw[0] != "--":
        repo.checkout_branch(raw[0])
    else:
        raise UserInputError()


@cli.command()
@reported
def log():
    """Show the history of the current branch."""
    repo = _repository()
    click.echo(format_log(repo.log(), config.repository.abbreviated_id_length))


@cli.command("global-log")
@reported
def global_log():
    """Show every commit ever made."""
    repo = _repository()
    click.echo(format_log(repo.global_log(), config.repository.abbreviated_id_length))


@cli.command()
@click.argument("message")
@reported
def find(message: str):
    """Print the ids of all commits with the given message."""
    click.echo(format_find(_repository().find(message)))


@cli.command()
@reported
def status():
    """Show branches, staged files and working directory changes."""
    click.echo(format_status(_repository().status()))


@cli.command()
@click.argument("name")
@reported
def branch(name: str):
    """Create a branch at the current commit."""
    _repository().branch(name)


@cli.command("rm-branch")
@click.argument("name")
@reported
def rm_branch(name: str):
    """Delete a branch."""
    _repository().rm_branch(name)


@cli.command()
@click.argument("commit_id")
@reported
def reset(commit_id: str):
    """Check out a commit and move the current branch to it."""
    _repository().reset(commit_id)


@cli.command()
@click.argument("branch_name")
@reported
def merge(branch_name: str):
    """Merge a branch into the current branch."""
    result = _repository().merge(branch_name)
    for notice in result.notices:
        click.echo(notice)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point: dispatch a command line and return the exit status.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
    """
    args = list(sys.argv[1:] if argv is None else argv)

    initialize_logging(config.logging)

    if not args:
        click.echo(NO_COMMAND)
        return 0
    if args[0] not in cli.commands:
        click.echo(UNKNOWN_COMMAND)
        return 0

    try:
        code = cli.main(args=args, prog_name="tinyvcs", standalone_mode=False)
    except click.UsageError:
        click.echo(UserInputError.message)
        return 0

    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
