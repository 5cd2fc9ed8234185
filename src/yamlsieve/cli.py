"""Command-line interface for yamlsieve."""

from __future__ import annotations

import locale
import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import click

from yamlsieve import __version__
from yamlsieve.config import ConfigError, LintConfig, find_project_config, find_user_config
from yamlsieve.engine import run
from yamlsieve.formatters import LEVEL_RANK, OutputFormat, show_problems
from yamlsieve.models.problems import ProblemLevel
from yamlsieve.patterns import normalize_path
from yamlsieve.settings import Settings

logger = logging.getLogger("yamlsieve.cli")

STDIN = "-"


def load_config(config_file: str | None, config_data: str | None, settings: Settings) -> LintConfig:
    """Resolve the configuration the way the command line documents it."""
    if config_data is not None:
        if config_data and ":" not in config_data:
            config_data = f"extends: {config_data}"
        return LintConfig(content=config_data)
    if config_file is not None:
        return LintConfig.from_file(config_file)

    project = find_project_config()
    if project is not None:
        logger.debug("using project config %s", project)
        return LintConfig.from_file(project)
    if settings.config_file:
        logger.debug("using config from settings %s", settings.config_file)
        return LintConfig.from_file(settings.config_file)
    user = find_user_config()
    if user is not None:
        logger.debug("using user config %s", user)
        return LintConfig.from_file(user)
    return LintConfig()


def find_files(items: tuple[str, ...], config: LintConfig) -> Iterator[str]:
    """Expand directories into the YAML files below them, in a stable order."""
    for item in items:
        if os.path.isdir(item):
            for root, dirnames, filenames in os.walk(item):
                dirnames.sort()
                for name in sorted(filenames):
                    path = os.path.join(root, name)
                    if config.is_yaml_file(path) and not config.is_file_ignored(path):
                        yield path
        else:
            yield item


@click.command()
@click.version_option(version=__version__)
@click.argument("files", nargs=-1, type=click.Path())
@click.option(
    "-c",
    "--config-file",
    type=click.Path(dir_okay=False),
    help="Path to a custom configuration file",
)
@click.option(
    "-d",
    "--config-data",
    help="Custom configuration as YAML source, or the name of a bundled one",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.AUTO.value,
    help="Output format",
)
@click.option(
    "-s",
    "--strict",
    is_flag=True,
    help="Return a non-zero exit code on warnings as well as errors",
)
@click.option("--no-warnings", is_flag=True, help="Output only error level problems")
@click.option("--list-files", is_flag=True, help="List the files to lint and exit")
def cli(
    files: tuple[str, ...],
    config_file: str | None,
    config_data: str | None,
    fmt: str,
    strict: bool,
    no_warnings: bool,
    list_files: bool,
) -> None:
    """Lint YAML FILES (or directories of YAML files).

    Use - to read from standard input.

    Examples:

        # Lint every YAML file below the current directory
        yamlsieve .

        # Use the relaxed configuration
        yamlsieve -d relaxed config.yaml
    """
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    if not files:
        raise click.UsageError("No files to lint. Use - to read from standard input.")

    try:
        config = load_config(config_file, config_data, settings)
    except (ConfigError, OSError) as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)

    if config.locale is not None:
        locale.setlocale(locale.LC_ALL, config.locale)

    if list_files:
        for path in find_files(files, config):
            if path != STDIN and not config.is_file_ignored(path):
                click.echo(path)
        sys.exit(0)

    output = OutputFormat(fmt)
    max_level = 0
    for path in find_files(files, config):
        name = "stdin" if path == STDIN else path
        try:
            if path == STDIN:
                problems = list(run(click.get_binary_stream("stdin").read(), config))
            else:
                problems = list(run(Path(path).read_bytes(), config, normalize_path(path)))
        except (OSError, UnicodeDecodeError) as exc:
            click.echo(f"Error reading {name}: {exc}", err=True)
            sys.exit(1)
        max_level = max(max_level, show_problems(problems, name, output, no_warnings))

    if max_level == LEVEL_RANK[ProblemLevel.ERROR]:
        sys.exit(1)
    if max_level == LEVEL_RANK[ProblemLevel.WARNING] and strict:
        sys.exit(2)
    sys.exit(0)
