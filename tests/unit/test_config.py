"""Tests for configuration loading, extension and validation."""

from __future__ import annotations

import re

import pytest

from yamlsieve.config import (
    ConfigError,
    LintConfig,
    find_project_config,
    find_user_config,
    resolve_extends,
    validate_rule_conf,
)
from yamlsieve.models.problems import ProblemLevel


class TestBundledConfigs:
    def test_default(self) -> None:
        config = LintConfig()
        assert config.rules["document-start"].level is ProblemLevel.WARNING
        assert config.rules["trailing-spaces"].level is ProblemLevel.ERROR
        assert config.rules["quoted-strings"] is None
        assert config.rules["key-ordering"] is None

    def test_relaxed(self, make_config) -> None:
        config = make_config("extends: relaxed")
        assert config.rules["comments"] is None
        assert config.rules["truthy"] is None
        line_length = config.rules["line-length"]
        assert line_length.level is ProblemLevel.WARNING
        assert line_length.options["allow-non-breakable-inline-mappings"] is True
        assert config.rules["indentation"].options["indent-sequences"] == "consistent"

    def test_resolve_extends(self, tmp_path) -> None:
        assert resolve_extends("default").name == "default.yaml"
        path = tmp_path / "base.yaml"
        assert resolve_extends(str(path)) == path


class TestRuleOptions:
    def test_enable_fills_defaults(self, make_config) -> None:
        config = make_config("rules:\n  colons: enable\n")
        assert config.rules["colons"].options == {
            "level": "error",
            "max-spaces-before": 0,
            "max-spaces-after": 1,
        }

    def test_disable(self, make_config) -> None:
        config = make_config("rules:\n  colons: disable\n  commas: enable\n")
        assert config.rules["colons"] is None
        assert [c.rule.id for c in config.rules_for()] == ["commas"]

    def test_rules_keep_configuration_order(self, make_config) -> None:
        config = make_config(
            "rules:\n  trailing-spaces: enable\n  colons: enable\n  anchors: enable\n"
        )
        assert [c.rule.id for c in config.rules_for()] == ["trailing-spaces", "colons", "anchors"]

    def test_validate_rule_conf(self, registry) -> None:
        rule = registry.get("hyphens")
        assert validate_rule_conf(rule, "disable") is None
        assert validate_rule_conf(rule, False) is None
        configured = validate_rule_conf(rule, {"max-spaces-after": 3, "level": "warning"})
        assert configured.options["max-spaces-after"] == 3
        assert configured.level is ProblemLevel.WARNING


class TestExtends:
    def test_override_one_option(self, make_config) -> None:
        config = make_config("extends: default\nrules:\n  line-length: {max: 120}\n")
        options = config.rules["line-length"].options
        assert options["max"] == 120
        assert options["allow-non-breakable-words"] is True
        assert config.rules["document-start"] is not None

    def test_override_merges_with_base_options(self, make_config) -> None:
        config = make_config("extends: relaxed\nrules:\n  line-length: {max: 100}\n")
        configured = config.rules["line-length"]
        assert configured.options["max"] == 100
        assert configured.level is ProblemLevel.WARNING
        assert configured.options["allow-non-breakable-inline-mappings"] is True

    def test_disable_inherited_rule(self, make_config) -> None:
        config = make_config("extends: default\nrules:\n  document-start: disable\n")
        assert config.rules["document-start"] is None

    def test_extends_file(self, make_config, tmp_path) -> None:
        base = tmp_path / "base.yaml"
        base.write_text("rules:\n  colons: {max-spaces-after: 4}\nyaml-files: ['*.conf']\n")
        config = make_config(f"extends: {base}\nrules:\n  colons: {{level: warning}}\n")
        assert config.rules["colons"].options["max-spaces-after"] == 4
        assert config.rules["colons"].level is ProblemLevel.WARNING
        assert config.is_yaml_file("app.conf")

    def test_base_order_comes_first(self, make_config, tmp_path) -> None:
        base = tmp_path / "base.yaml"
        base.write_text("rules:\n  commas: enable\n")
        config = make_config(f"extends: {base}\nrules:\n  colons: enable\n")
        assert [c.rule.id for c in config.rules_for()] == ["commas", "colons"]


class TestErrors:
    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("- a\n", "invalid config: not a mapping"),
            ("rules: [\n", "invalid config"),
            ("extends: 3\n", "invalid config: extends should be a string"),
            ("rules: [a]\n", "invalid config: rules should be a mapping"),
            ("rules: {no-such-rule: enable}", 'no such rule: "no-such-rule"'),
            ("rules: {colons: {max: 1}}", 'unknown option "max" for rule "colons"'),
            ("rules: {line-length: {max: true}}", 'option "max" of "line-length" should be int'),
            (
                "rules: {indentation: {spaces: two}}",
                'option "spaces" of "indentation" should be in',
            ),
            (
                "rules: {truthy: {allowed-values: [maybe]}}",
                'option "allowed-values" of "truthy" should only contain values in',
            ),
            ("rules: {colons: {level: info}}", 'level should be "error" or "warning"'),
            ("rules: {colons: 3}", 'should be either "enable", "disable" or a mapping'),
            (
                "rules: {quoted-strings: {extra-allowed: [x]}}",
                'quoted-strings: cannot use both "required: true" and "extra-allowed"',
            ),
            (
                "ignore: a\nignore-from-file: .gitignore\n",
                "ignore and ignore-from-file keys cannot be used together",
            ),
            ("rules: {colons: {ignore: 3}}", "ignore should contain file patterns"),
        ],
    )
    def test_invalid(self, make_config, content: str, message: str) -> None:
        with pytest.raises(ConfigError, match=re.escape(message)):
            make_config(content)

    def test_content_and_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError):
            LintConfig(content="rules: {}", file=tmp_path / "x.yaml")

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="cannot read"):
            LintConfig.from_file(tmp_path / "missing.yaml")

    def test_undecodable_file(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_bytes(b"rules:\n  colons: \xff\xfe\x80\n")
        with pytest.raises(ConfigError, match="cannot read"):
            LintConfig.from_file(path)

    def test_missing_ignore_file(self, make_config, tmp_path) -> None:
        with pytest.raises(ConfigError, match="cannot read ignore file"):
            make_config(f"ignore-from-file: {tmp_path / 'nope'}\n")


class TestFiles:
    def test_ignore(self, make_config) -> None:
        config = make_config("ignore: |\n  vendor/\n  *.gen.yaml\n  !keep.gen.yaml\n")
        assert config.is_file_ignored("vendor/a.yaml")
        assert config.is_file_ignored("src/x.gen.yaml")
        assert not config.is_file_ignored("src/keep.gen.yaml")
        assert not config.is_file_ignored("src/a.yaml")

    def test_ignore_as_list(self, make_config) -> None:
        config = make_config("ignore: ['build/', 'tmp.yaml']\n")
        assert config.is_file_ignored("build/out.yaml")
        assert config.is_file_ignored("a/tmp.yaml")

    def test_ignore_from_file(self, make_config, tmp_path) -> None:
        ignore_file = tmp_path / ".gitignore"
        ignore_file.write_text("# generated\nout/\n")
        config = make_config(f"ignore-from-file: {ignore_file}\n")
        assert config.is_file_ignored("out/a.yaml")
        assert not config.is_file_ignored("src/a.yaml")

    def test_rule_ignore_from_file(self, make_config, tmp_path) -> None:
        ignore_file = tmp_path / "ignored"
        ignore_file.write_text("legacy/\n")
        config = make_config(
            f"rules:\n  colons:\n    ignore-from-file: [{ignore_file}]\n"
        )
        assert config.rules_for("legacy/a.yaml") == []
        assert len(config.rules_for("new/a.yaml")) == 1

    def test_yaml_files(self, make_config) -> None:
        config = make_config("rules: {}")
        assert config.is_yaml_file("dir/a.yaml")
        assert config.is_yaml_file("dir/b.yml")
        assert config.is_yaml_file(".yamllint")
        assert not config.is_yaml_file("dir/c.json")

        custom = make_config("yaml-files: ['*.cfg']\nrules: {}\n")
        assert custom.is_yaml_file("x.cfg")
        assert not custom.is_yaml_file("x.yaml")

    def test_locale(self, make_config) -> None:
        assert make_config("locale: C.UTF-8\n").locale == "C.UTF-8"

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / ".yamllint"
        path.write_text("rules:\n  colons: enable\n")
        config = LintConfig.from_file(path)
        assert list(config.rules) == ["colons"]


class TestDiscovery:
    def test_project_config(self, tmp_path) -> None:
        (tmp_path / ".yamllint.yaml").write_text("rules: {}\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_config(nested) == (tmp_path / ".yamllint.yaml").resolve()

    def test_project_config_prefers_dotfile(self, tmp_path) -> None:
        (tmp_path / ".yamllint").write_text("rules: {}\n")
        (tmp_path / ".yamllint.yml").write_text("rules: {}\n")
        assert find_project_config(tmp_path).name == ".yamllint"

    def test_user_config(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert find_user_config() is None
        (tmp_path / "yamllint").mkdir()
        (tmp_path / "yamllint" / "config").write_text("rules: {}\n")
        assert find_user_config() == tmp_path / "yamllint" / "config"
