"""
Unit tests for configuration loading, overrides and validation.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
import yaml
from spanweaver.config import (
    DEFAULT_CONFIG,
    AlignmentParameters,
    ConfigParser,
    ConfigValidationError,
    load_config,
    save_config_template,
    validate_config,
)


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestSchema:
    """Test defaults, templates and validation rules."""

    def test_defaults_valid(self):
        """The default configuration passes validation."""
        assert validate_config(DEFAULT_CONFIG) == []

    def test_default_parameters(self):
        """Defaults are k=31, Q10, sum 60."""
        assert AlignmentParameters.from_config(DEFAULT_CONFIG) == AlignmentParameters(31, 10, 60)

    @pytest.mark.parametrize("section, key, value", [
        ("alignment", "kmer_size", 20),
        ("alignment", "kmer_size", 0),
        ("alignment", "min_quality", -1),
        ("alignment", "max_quality_sum", "lots"),
        ("index", "shards", 0),
        ("index", "min_contig_length", -5),
        ("execution", "threads", 0),
        ("output", "format", "sam"),
    ])
    def test_invalid_values(self, section, key, value):
        """Each out-of-range setting is reported."""
        config = load_config()
        config[section][key] = value
        errors = validate_config(config)
        assert len(errors) == 1
        assert f"{section}.{key}" in errors[0]

    def test_invalid_log_level(self):
        """Unknown level names are reported."""
        config = load_config()
        config["output"]["logging"]["level"] = "LOUD"
        assert validate_config(config)

    @pytest.mark.parametrize("template", ["default", "sensitive", "strict"])
    def test_templates_valid(self, temp_output_dir, template):
        """Every template writes a valid configuration."""
        path = temp_output_dir / f"{template}.yaml"
        save_config_template(path, template=template)
        assert validate_config(load_config(path)) == []

    def test_strict_template(self, temp_output_dir):
        """Strict template tightens the quality settings."""
        path = temp_output_dir / "strict.yaml"
        save_config_template(path, template="strict")
        params = AlignmentParameters.from_config(load_config(path))
        assert params.min_quality == 20
        assert params.max_quality_sum == 30

    def test_unknown_template(self, temp_output_dir):
        """Unknown templates are rejected."""
        with pytest.raises(ValueError):
            save_config_template(temp_output_dir / "x.yaml", template="bogus")

    def test_load_merges_partial(self, temp_output_dir):
        """A partial file keeps the other defaults."""
        path = write_yaml(temp_output_dir / "c.yaml", {"alignment": {"kmer_size": 21}})
        config = load_config(path)
        assert config["alignment"]["kmer_size"] == 21
        assert config["alignment"]["min_quality"] == 10
        assert DEFAULT_CONFIG["alignment"]["kmer_size"] == 31

    def test_empty_section_reported(self):
        """A section that is not a mapping is an error, not a crash."""
        config = {**DEFAULT_CONFIG, "alignment": None}
        assert validate_config(config) == ["Invalid alignment: None (must be a mapping)"]

    def test_non_mapping_config(self):
        """A configuration that is not a mapping is reported."""
        assert validate_config([1]) == ["Configuration must be a mapping, got list"]

    def test_load_top_level_list(self, temp_output_dir):
        """load_config rejects a file whose top level is a list."""
        path = temp_output_dir / "c.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigValidationError):
            load_config(path)


class TestConfigParser:
    """Test the parser wrapper."""

    def test_defaults_without_file(self):
        """No file means defaults."""
        parser = ConfigParser()
        assert parser.get("alignment.kmer_size") == 31
        assert parser.get("missing.key", "fallback") == "fallback"
        assert parser.validate()

    def test_missing_file(self, temp_output_dir):
        """A named file that does not exist is an error."""
        with pytest.raises(FileNotFoundError):
            ConfigParser(temp_output_dir / "absent.yaml")

    def test_invalid_yaml(self, temp_output_dir):
        """Unparseable YAML raises ConfigValidationError."""
        path = temp_output_dir / "bad.yaml"
        path.write_text("alignment: [unclosed\n")
        with pytest.raises(ConfigValidationError):
            ConfigParser(path)

    def test_top_level_list(self, temp_output_dir):
        """A list at the top level raises ConfigValidationError."""
        path = temp_output_dir / "c.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigValidationError):
            ConfigParser(path)

    def test_section_getters(self):
        """Index and output sections reflect defaults and overrides."""
        parser = ConfigParser()
        assert parser.get_index_config()["shards"] == 1
        assert parser.get_output_config()["format"] == "text"
        parser.merge_cli_overrides({"index.shards": 3, "output.format": "json"})
        assert parser.get_index_config()["shards"] == 3
        assert parser.get_output_config()["format"] == "json"

    def test_env_substitution(self, temp_output_dir, monkeypatch):
        """${VAR} and ${VAR:-default} are expanded."""
        monkeypatch.setenv("SW_K", "25")
        monkeypatch.delenv("SW_LOG", raising=False)
        path = write_yaml(temp_output_dir / "c.yaml", {
            "alignment": {"kmer_size": "${SW_K}"},
            "output": {"logging": {"log_file": "${SW_LOG:-run.log}"}},
        })
        parser = ConfigParser(path)
        assert parser.get("alignment.kmer_size") == 25
        assert parser.get("output.logging.log_file") == "run.log"
        assert parser.validate()

    def test_cli_overrides(self):
        """Dotted overrides apply; None leaves the value alone."""
        parser = ConfigParser()
        parser.merge_cli_overrides({
            "alignment.kmer_size": 15,
            "alignment.min_quality": None,
            "execution.threads": 4,
        })
        assert parser.get_alignment_config()["kmer_size"] == 15
        assert parser.get_alignment_config()["min_quality"] == 10
        assert parser.get_execution_config()["threads"] == 4
        assert parser.alignment_parameters().kmer_size == 15

    def test_validate_raises(self):
        """Invalid settings raise with every problem listed."""
        parser = ConfigParser()
        parser.merge_cli_overrides({"alignment.kmer_size": 4, "index.shards": 0})
        with pytest.raises(ConfigValidationError) as excinfo:
            parser.validate()
        assert "alignment.kmer_size" in str(excinfo.value)
        assert "index.shards" in str(excinfo.value)

    def test_to_dict_is_a_copy(self):
        """Mutating the export does not change the parser."""
        parser = ConfigParser()
        exported = parser.to_dict()
        exported["alignment"]["kmer_size"] = 99
        assert parser.get("alignment.kmer_size") == 31
