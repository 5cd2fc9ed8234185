"""Render lint problems for the terminal and for CI log annotations."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from enum import StrEnum

import click

from yamlsieve.models.problems import LintProblem, ProblemLevel

LEVEL_RANK = {None: 0, ProblemLevel.WARNING: 1, ProblemLevel.ERROR: 2}


class OutputFormat(StrEnum):
    PARSABLE = "parsable"
    STANDARD = "standard"
    COLORED = "colored"
    GITHUB = "github"
    AUTO = "auto"


def supports_color() -> bool:
    if sys.platform == "win32":
        return "ANSICON" in os.environ or os.environ.get("TERM") == "ANSI"
    return sys.stdout.isatty()


def resolve_format(fmt: OutputFormat) -> OutputFormat:
    """Pick a concrete format for ``auto``."""
    if fmt is not OutputFormat.AUTO:
        return fmt
    if os.environ.get("GITHUB_ACTIONS") and os.environ.get("GITHUB_WORKFLOW"):
        return OutputFormat.GITHUB
    if supports_color():
        return OutputFormat.COLORED
    return OutputFormat.STANDARD


def format_parsable(problem: LintProblem, filename: str) -> str:
    return f"{filename}:{problem.line}:{problem.column}: [{problem.level}] {problem.message}"


def format_standard(problem: LintProblem) -> str:
    line = f"  {problem.line}:{problem.column}".ljust(12)
    line = (line + str(problem.level)).ljust(21)
    line += problem.desc
    if problem.rule:
        line += f"  ({problem.rule})"
    return line


def format_colored(problem: LintProblem) -> str:
    position = f"{problem.line}:{problem.column}"
    line = "  " + click.style(position, dim=True)
    line += " " * max(12 - len(position) - 2, 0)
    level = str(problem.level)
    color = "yellow" if problem.level is ProblemLevel.WARNING else "red"
    line += click.style(level, fg=color)
    line += " " * max(9 - len(level), 0)
    line += problem.desc
    if problem.rule:
        line += "  " + click.style(f"({problem.rule})", dim=True)
    return line


def format_github(problem: LintProblem, filename: str) -> str:
    line = f"::{problem.level} file={filename},line={problem.line},col={problem.column}"
    line += f"::{problem.line}:{problem.column} "
    if problem.rule:
        line += f"[{problem.rule}] "
    return line + problem.desc


def show_problems(
    problems: Iterable[LintProblem],
    filename: str,
    fmt: OutputFormat,
    no_warnings: bool = False,
) -> int:
    """Echo ``problems`` for one file and return the highest level rank seen."""
    fmt = resolve_format(fmt)
    max_level = 0
    first = True

    for problem in problems:
        max_level = max(max_level, LEVEL_RANK[problem.level])
        if no_warnings and problem.level is not ProblemLevel.ERROR:
            continue

        if fmt is OutputFormat.PARSABLE:
            click.echo(format_parsable(problem, filename))
            continue

        if first:
            if fmt is OutputFormat.GITHUB:
                click.echo(f"::group::{filename}")
            elif fmt is OutputFormat.COLORED:
                click.echo(click.style(filename, underline=True), color=True)
            else:
                click.echo(filename)
            first = False

        if fmt is OutputFormat.GITHUB:
            click.echo(format_github(problem, filename))
        elif fmt is OutputFormat.COLORED:
            click.echo(format_colored(problem), color=True)
        else:
            click.echo(format_standard(problem))

    if not first and fmt is OutputFormat.GITHUB:
        click.echo("::endgroup::")
    if not first and fmt is not OutputFormat.PARSABLE:
        click.echo("")

    return max_level
