"""Tests for configuration handling."""

import json

import pytest
import yaml

from arlink.config import (Config, get_default_config, load_config,
                           save_config, validate_config)


class TestConfig:
    """Tests for the Config dataclass."""

    def test_defaults(self):
        config = get_default_config()
        assert config.regulatory_domain["basal_upstream"] == 5000
        assert config.regulatory_domain["basal_downstream"] == 1000
        assert config.regulatory_domain["max_extension"] == 1000000
        assert config.regulatory_domain["strand_aware"] is False
        assert config.inputs == {"genes": None, "tads": None, "ars": None, "tss": None}

    def test_partial_sections_merged_with_defaults(self):
        config = Config(regulatory_domain={"max_extension": 500})
        assert config.regulatory_domain["max_extension"] == 500
        assert config.regulatory_domain["basal_upstream"] == 5000
        assert config.io["chromosome_prefix"] == "chr"

    def test_to_dict(self):
        data = Config(project_name="demo").to_dict()
        assert data["project_name"] == "demo"
        assert "tad_policy" in data


class TestConfigFiles:
    """Tests for loading and saving configuration files."""

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(Config(project_name="yaml_demo", n_jobs=2), path)

        assert yaml.safe_load(path.read_text())["project_name"] == "yaml_demo"
        config = load_config(path)
        assert config.project_name == "yaml_demo"
        assert config.n_jobs == 2

    def test_json_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        save_config(Config(genome_build="hg38"), path)

        assert json.loads(path.read_text())["genome_build"] == "hg38"
        assert load_config(path).genome_build == "hg38"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("project_name = 'x'\n")
        with pytest.raises(ValueError):
            load_config(path)


class TestValidateConfig:
    """Tests for validate_config."""

    def test_default_config_is_valid(self):
        assert validate_config(Config()) == []

    def test_missing_input_file(self, tmp_path):
        config = Config(inputs={"genes": str(tmp_path / "nope.bed")})
        issues = validate_config(config)
        assert any("genes" in issue for issue in issues)

    def test_unknown_input_table(self):
        issues = validate_config(Config(inputs={"exons": "x.bed"}))
        assert any("Unknown input table" in issue for issue in issues)

    def test_negative_window_parameter(self):
        issues = validate_config(Config(regulatory_domain={"basal_upstream": -1}))
        assert issues == ["regulatory_domain.basal_upstream must be a non-negative integer"]

    def test_zero_jobs(self):
        assert validate_config(Config(n_jobs=0)) == ["n_jobs must be a non-zero integer"]
