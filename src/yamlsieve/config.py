"""Lint configuration: which rules run, with which options, on which files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yamlsieve.decoder import decode, lines_in_files
from yamlsieve.models.problems import ProblemLevel
from yamlsieve.patterns import PathPatterns
from yamlsieve.rules import Rule, RuleRegistry, UnknownRuleError, build_registry
from yamlsieve.rules.base import RuleConf

logger = logging.getLogger("yamlsieve.config")

CONF_DIR = Path(__file__).parent / "conf"
PROJECT_CONFIG_FILENAMES = (".yamllint", ".yamllint.yaml", ".yamllint.yml")
DEFAULT_YAML_FILES = ("*.yaml", "*.yml", ".yamllint")

# Keys every rule mapping may carry on top of the rule's own options
_COMMON_KEYS = frozenset({"level", "ignore", "ignore-from-file"})


class ConfigError(Exception):
    """Raised when a configuration cannot be read or is invalid."""


# ---------------------------------------------------------------------------
# Raw document shape
# ---------------------------------------------------------------------------

_FIELD_ERRORS = {
    "extends": "extends should be a string",
    "rules": "rules should be a mapping",
    "ignore": "ignore should contain file patterns",
    "ignore-from-file": (
        "ignore-from-file should contain filename(s), either as a list or string"
    ),
    "yaml-files": "yaml-files should be a list of file patterns",
    "locale": "locale should be a string",
}


class RawConfig(BaseModel):
    """Top-level keys of a configuration document, before rule validation."""

    extends: str | None = None
    rules: dict[str, Any] | None = None
    ignore: str | list[str] | None = None
    ignore_from_file: str | list[str] | None = Field(None, alias="ignore-from-file")
    yaml_files: list[str] | None = Field(None, alias="yaml-files")
    locale: str | None = None

    model_config = {"populate_by_name": True, "strict": True, "extra": "ignore"}

    @classmethod
    def from_yaml(cls, content: str) -> RawConfig:
        try:
            data = YAML(typ="safe", pure=True).load(content)
        except YAMLError as exc:
            raise ConfigError(f"invalid config: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("invalid config: not a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            loc = exc.errors()[0]["loc"]
            field = str(loc[0]) if loc else ""
            raise ConfigError(
                f"invalid config: {_FIELD_ERRORS.get(field, exc.errors()[0]['msg'])}"
            ) from exc


def _patterns_from(value: str | list[str]) -> PathPatterns:
    if isinstance(value, str):
        return PathPatterns.from_lines(value.splitlines())
    return PathPatterns.from_lines(value)


def _patterns_from_files(value: str | list[str]) -> PathPatterns:
    paths = [value] if isinstance(value, str) else value
    try:
        return PathPatterns.from_lines(lines_in_files(paths))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"invalid config: cannot read ignore file: {exc}") from exc


# ---------------------------------------------------------------------------
# Rule options
# ---------------------------------------------------------------------------


def _describe(schema: Any) -> str:
    if isinstance(schema, type):
        return schema.__name__
    if isinstance(schema, (tuple, list)):
        return "[" + ", ".join(_describe(item) for item in schema) + "]"
    return repr(schema)


def _is_instance(value: Any, kind: type) -> bool:
    # bool is an int subclass; keep them apart
    if kind is int and isinstance(value, bool):
        return False
    return isinstance(value, kind)


def _accepts(allowed: tuple[Any, ...] | list[Any], value: Any) -> bool:
    for item in allowed:
        if isinstance(item, type):
            if _is_instance(value, item):
                return True
        elif type(item) is type(value) and item == value:
            return True
    return False


@dataclass(frozen=True)
class ConfiguredRule:
    """An enabled rule with its validated options (``level`` included)."""

    rule: Rule
    options: RuleConf
    ignore: PathPatterns | None = None

    @property
    def level(self) -> ProblemLevel:
        return ProblemLevel(self.options["level"])


def validate_rule_conf(rule: Rule, conf: Any) -> ConfiguredRule | None:
    """Validate one ``rules:`` entry; ``None`` means the rule is disabled."""
    if conf is False or conf == "disable":
        return None
    if conf is True or conf == "enable":
        conf = {}
    if not isinstance(conf, dict):
        raise ConfigError(
            f'invalid config: rule "{rule.id}": should be either "enable", "disable" or a mapping'
        )

    ignore = None
    if "ignore-from-file" in conf:
        value = conf["ignore-from-file"]
        if not isinstance(value, str) and not (
            isinstance(value, list) and all(isinstance(item, str) for item in value)
        ):
            raise ConfigError(
                "invalid config: ignore-from-file should contain valid filename(s), "
                "either as a list or string"
            )
        ignore = _patterns_from_files(value)
    elif "ignore" in conf:
        value = conf["ignore"]
        if not isinstance(value, str) and not (
            isinstance(value, list) and all(isinstance(item, str) for item in value)
        ):
            raise ConfigError("invalid config: ignore should contain file patterns")
        ignore = _patterns_from(value)

    options: RuleConf = {"level": ProblemLevel.ERROR.value}
    if "level" in conf:
        if conf["level"] not in (ProblemLevel.ERROR.value, ProblemLevel.WARNING.value):
            raise ConfigError('invalid config: level should be "error" or "warning"')
        options["level"] = conf["level"]

    for key, value in conf.items():
        if key in _COMMON_KEYS:
            continue
        if key not in rule.options:
            raise ConfigError(f'invalid config: unknown option "{key}" for rule "{rule.id}"')

        schema = rule.options[key]
        if isinstance(schema, tuple):
            if not _accepts(schema, value):
                raise ConfigError(
                    f'invalid config: option "{key}" of "{rule.id}" should be in '
                    f"{_describe(schema)}"
                )
        elif isinstance(schema, list):
            if not isinstance(value, list) or not all(_accepts(schema, item) for item in value):
                raise ConfigError(
                    f'invalid config: option "{key}" of "{rule.id}" should only contain '
                    f"values in {_describe(schema)}"
                )
        elif not _is_instance(value, schema):
            raise ConfigError(
                f'invalid config: option "{key}" of "{rule.id}" should be {schema.__name__}'
            )
        options[key] = value

    for key, default in rule.defaults.items():
        options.setdefault(key, default)

    error = rule.validate(options)
    if error:
        raise ConfigError(f"invalid config: {rule.id}: {error}")

    return ConfiguredRule(rule=rule, options=options, ignore=ignore)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def resolve_extends(name: str) -> Path:
    """Map ``default``/``relaxed`` to the bundled files; anything else is a path."""
    if "/" not in name and "\\" not in name:
        bundled = CONF_DIR / f"{name}.yaml"
        if bundled.is_file():
            return bundled
    return Path(name)


class LintConfig:
    """A validated configuration.

    Pass either ``content`` (YAML text) or ``file``; with neither the bundled
    ``default`` configuration is used.  Every rule is validated here, so a
    constructed config never fails later.
    """

    def __init__(
        self,
        content: str | None = None,
        file: str | os.PathLike[str] | None = None,
        registry: RuleRegistry | None = None,
    ) -> None:
        if content is not None and file is not None:
            raise ConfigError("LintConfig takes either content or file, not both")

        self.registry = registry if registry is not None else build_registry()
        self.raw_rules: dict[str, Any] = {}
        self.rules: dict[str, ConfiguredRule | None] = {}
        self.ignore: PathPatterns | None = None
        self.yaml_files = PathPatterns.from_lines(DEFAULT_YAML_FILES)
        self.locale: str | None = None

        if file is not None:
            logger.debug("loading config file %s", file)
            try:
                content = decode(Path(file).read_bytes())
            except (OSError, UnicodeDecodeError) as exc:
                raise ConfigError(f"invalid config: cannot read {file}: {exc}") from exc
        elif content is None:
            content = "extends: default"

        self._parse(content)
        self._validate()

    @classmethod
    def from_file(
        cls, path: str | os.PathLike[str], registry: RuleRegistry | None = None
    ) -> LintConfig:
        return cls(file=path, registry=registry)

    def _parse(self, content: str) -> None:
        raw = RawConfig.from_yaml(content)

        if raw.extends:
            base = LintConfig.from_file(resolve_extends(raw.extends), self.registry)
            self._extend(base)

        for rule_id, conf in (raw.rules or {}).items():
            base_conf = self.raw_rules.get(rule_id)
            if conf == "enable":
                conf = {}
            if isinstance(conf, dict) and isinstance(base_conf, dict):
                self.raw_rules[rule_id] = {**base_conf, **conf}
            else:
                self.raw_rules[rule_id] = conf

        if raw.ignore is not None and raw.ignore_from_file is not None:
            raise ConfigError(
                "invalid config: ignore and ignore-from-file keys cannot be used together"
            )
        if raw.ignore_from_file is not None:
            self.ignore = _patterns_from_files(raw.ignore_from_file)
        elif raw.ignore is not None:
            self.ignore = _patterns_from(raw.ignore)

        if raw.yaml_files is not None:
            self.yaml_files = PathPatterns.from_lines(raw.yaml_files)
        if raw.locale is not None:
            self.locale = raw.locale

    def _extend(self, base: LintConfig) -> None:
        self.raw_rules = dict(base.raw_rules)
        self.ignore = base.ignore
        self.yaml_files = base.yaml_files
        self.locale = base.locale

    def _validate(self) -> None:
        for rule_id, conf in self.raw_rules.items():
            try:
                rule = self.registry.get(rule_id)
            except UnknownRuleError as exc:
                raise ConfigError(f"invalid config: {exc}") from exc
            self.rules[rule_id] = validate_rule_conf(rule, conf)

    # -- queries -------------------------------------------------------------

    def rules_for(self, filepath: str | None = None) -> list[ConfiguredRule]:
        """Enabled rules, in configuration order, minus those ignoring ``filepath``."""
        result = []
        for configured in self.rules.values():
            if configured is None:
                continue
            if filepath is not None and configured.ignore and configured.ignore.matches(filepath):
                continue
            result.append(configured)
        return result

    def is_file_ignored(self, filepath: str) -> bool:
        return self.ignore is not None and self.ignore.matches(filepath)

    def is_yaml_file(self, filepath: str) -> bool:
        return self.yaml_files.matches(os.path.basename(filepath))


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_project_config(start: Path | None = None) -> Path | None:
    """Look for a project config file from ``start`` up to the home directory."""
    directory = (start or Path.cwd()).resolve()
    home = Path.home()
    while True:
        for name in PROJECT_CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        if directory == home or directory.parent == directory:
            return None
        directory = directory.parent


def find_user_config() -> Path | None:
    """``$XDG_CONFIG_HOME/yamllint/config`` (``~/.config`` by default)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    candidate = Path(base) / "yamllint" / "config"
    return candidate if candidate.is_file() else None
