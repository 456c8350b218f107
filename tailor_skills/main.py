"""Command-line entry point: ``tailor-skills add|update|list``."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from tailor_skills import __version__
from tailor_skills.config import get_skills_dir
from tailor_skills.error_logging import log_error, log_error_message
from tailor_skills.errors import SkillsError
from tailor_skills.http_fetcher import open_client
from tailor_skills.installer import add_skill
from tailor_skills.updater import (
    UpdateOutcome,
    find_updatable_skills,
    list_installed_skills,
    update_all_skills,
    update_skill,
)

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True, highlight=False, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)

RESTART_HINT = "Restart Claude Code to apply changes."
REINSTALL_HINT = 'Re-install skills with "tailor-skills add <url>" to enable updates.'

USAGE = """Usage:
  tailor-skills add <github-skill-url>
  tailor-skills update [skill-name]
  tailor-skills list

Examples:
  tailor-skills add https://github.com/TailorHub-Mad/ai-skills/tailor-code-review
  tailor-skills update
  tailor-skills update tailor-code-review"""


class UsageError(Exception):
    """Raised instead of argparse's exit(2) so bad invocations exit 1 with usage."""


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="tailor-skills",
        description="Install skills from GitHub repositories and keep them updated",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--skills-dir",
        type=Path,
        default=None,
        help="Directory skills are installed into (default: ~/.claude/skills)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    add_parser = subparsers.add_parser("add", help="Install a skill from a GitHub URL")
    add_parser.add_argument("url", help="https://github.com/<owner>/<repo>/<skill>")

    update_parser = subparsers.add_parser(
        "update", help="Re-fetch one skill, or every skill with source info"
    )
    update_parser.add_argument("name", nargs="?", default=None)

    subparsers.add_parser("list", help="Show installed skills and their sources")

    return parser


def setup_logging(verbose: bool = False) -> None:
    """Progress goes to stderr at INFO; ``-v`` adds debug detail from every module."""

    if verbose:
        logging.basicConfig(
            stream=sys.stderr,
            level=logging.DEBUG,
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        )
    else:
        logging.basicConfig(
            stream=sys.stderr, level=logging.WARNING, format="%(message)s"
        )
        logging.getLogger("tailor_skills").setLevel(logging.INFO)


def _print_error(message: str) -> None:
    err_console.print(f"Error: {message}", markup=False)


async def run_add(url: str, skills_dir: Optional[Path]) -> int:
    async with open_client() as client:
        install_dir = await add_skill(url, skills_dir=skills_dir, client=client)

    skill_name = install_dir.relative_to(skills_dir or get_skills_dir()).as_posix()
    console.print(f'\nSkill "{skill_name}" installed to {install_dir}/', markup=False)
    console.print("Restart Claude Code to use it.")
    return 0


async def run_update_one(name: str, skills_dir: Optional[Path]) -> int:
    async with open_client() as client:
        install_dir = await update_skill(name, skills_dir=skills_dir, client=client)

    console.print(f'\nSkill "{name}" updated at {install_dir}/', markup=False)
    console.print(RESTART_HINT)
    return 0


def _report_outcome(outcome: UpdateOutcome) -> None:
    if outcome.ok:
        console.print(
            f'  Updated "{outcome.skill_name}" at {outcome.install_dir}/', markup=False
        )
    else:
        err_console.print(
            f'  Failed to update "{outcome.skill_name}": {outcome.error}', markup=False
        )
        log_error_message(
            f'Failed to update "{outcome.skill_name}": {outcome.error}',
            context="tailor-skills update",
        )


async def run_update_all(skills_dir: Optional[Path]) -> int:
    root = skills_dir or get_skills_dir()
    if not root.is_dir():
        console.print("No skills directory found. Nothing to update.")
        return 0

    names = find_updatable_skills(root)
    if not names:
        console.print("No updatable skills found.")
        console.print(REINSTALL_HINT, markup=False)
        return 0

    console.print(f"Updating {len(names)} skill(s)...\n")

    async with open_client() as client:
        summary = await update_all_skills(
            skills_dir=root, client=client, on_result=_report_outcome, names=names
        )

    console.print(
        f"\nDone. {len(summary.ok)} updated, {len(summary.failed)} failed."
    )
    if summary.ok:
        console.print(RESTART_HINT)
    return 0


def run_list(skills_dir: Optional[Path]) -> int:
    installed = list_installed_skills(skills_dir)
    if not installed:
        console.print("No skills installed.")
        return 0

    for name, record in installed:
        source = record.url if record is not None else "(no source info)"
        console.print(f"  {name}  {source}", markup=False)
    return 0


async def dispatch(args: argparse.Namespace) -> int:
    if args.command == "add":
        return await run_add(args.url, args.skills_dir)
    if args.command == "update":
        if args.name:
            return await run_update_one(args.name, args.skills_dir)
        return await run_update_all(args.skills_dir)
    if args.command == "list":
        return run_list(args.skills_dir)
    raise UsageError("no command given")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.command is None:
            raise UsageError("no command given")
    except UsageError as e:
        logger.debug(f"Usage error: {e}")
        err_console.print(USAGE, markup=False)
        return 1

    setup_logging(args.verbose)

    try:
        return asyncio.run(dispatch(args))
    except SkillsError as e:
        _print_error(str(e))
        return 1
    except OSError as e:
        log_error(e, context=f"tailor-skills {args.command}")
        _print_error(str(e))
        return 1
    except Exception as e:
        log_error(e, context=f"tailor-skills {args.command}")
        _print_error(f"Unexpected error: {e}")
        return 1


def main_entry() -> int:
    """Entry point for the installed CLI tool."""
    try:
        return main()
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main_entry())
