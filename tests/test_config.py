"""Tests for config loading, saving and merging."""

import json

import pytest

from gaitcore.config import DEFAULT_CONFIG, get_config, load_config, save_config


class TestLoadConfig:

    def test_partial_json_is_merged(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"timenormalize": {"length": 50}}))
        cfg = load_config(path)
        assert cfg["timenormalize"]["length"] == 50
        assert cfg["timenormalize"]["bc_type"] == "natural"
        assert cfg["ensemble"] == DEFAULT_CONFIG["ensemble"]

    def test_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "cfg.yaml"
        path.write_text("ensemble:\n  ddof: 0\n  circular: true\n")
        cfg = load_config(path)
        assert cfg["ensemble"]["ddof"] == 0
        assert cfg["ensemble"]["circular"] is True
        assert cfg["events"]["fs"] == 100.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_non_dict_content(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError, match="dict"):
            load_config(path)


class TestSaveConfig:

    def test_json_round_trip(self, tmp_path):
        cfg = get_config({"spatiotemporal": {"required_steps": 10}})
        out = save_config(cfg, tmp_path / "sub" / "cfg.json")
        assert load_config(out) == cfg

    def test_yaml_round_trip(self, tmp_path):
        pytest.importorskip("yaml")
        cfg = get_config({"timenormalize": {"length": 51}})
        out = save_config(cfg, tmp_path / "cfg.yml")
        assert load_config(out) == cfg


class TestGetConfig:

    def test_defaults_are_copied(self):
        cfg = get_config()
        cfg["timenormalize"]["length"] = 7
        assert DEFAULT_CONFIG["timenormalize"]["length"] == 100

    def test_override_does_not_mutate_defaults(self):
        cfg = get_config({"events": {"fs": 250.0}})
        assert cfg["events"]["fs"] == 250.0
        assert DEFAULT_CONFIG["events"]["fs"] == 100.0

    def test_every_key_is_a_known_section(self):
        assert set(DEFAULT_CONFIG) == {"events", "spatiotemporal", "timenormalize", "ensemble"}

    def test_non_dict_raises(self):
        with pytest.raises(TypeError):
            get_config("fast")
