import json

import pytest

from ffnet.config import ENV_INDENT, ENV_WARN_ON_CUSTOM, StorageConfig, load_config


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv(ENV_INDENT, raising=False)
    monkeypatch.delenv(ENV_WARN_ON_CUSTOM, raising=False)
    assert load_config() == StorageConfig(indent=None, warn_on_custom=True)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv(ENV_INDENT, "2")
    monkeypatch.setenv(ENV_WARN_ON_CUSTOM, "0")
    assert StorageConfig.from_env() == StorageConfig(indent=2, warn_on_custom=False)


def test_json_file_overrides_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_INDENT, "2")
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"indent": 4}))
    config = load_config(path)
    assert config.indent == 4
    assert config.warn_on_custom is True


def test_yaml_file(tmp_path, monkeypatch):
    pytest.importorskip("yaml")
    monkeypatch.delenv(ENV_INDENT, raising=False)
    path = tmp_path / "storage.yaml"
    path.write_text("warn_on_custom: false\n")
    assert load_config(path) == StorageConfig(indent=None, warn_on_custom=False)


def test_unknown_keys_and_suffixes_are_rejected(tmp_path):
    bad_key = tmp_path / "storage.json"
    bad_key.write_text(json.dumps({"compression": "gzip"}))
    with pytest.raises(KeyError, match="compression"):
        load_config(bad_key)

    bad_suffix = tmp_path / "storage.toml"
    bad_suffix.write_text("indent = 2\n")
    with pytest.raises(ValueError, match="Unsupported config file type"):
        load_config(bad_suffix)


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"indent": "x"}, "indent"),
        ({"indent": True}, "indent"),
        ({"warn_on_custom": "false"}, "warn_on_custom"),
        ({"warn_on_custom": 0}, "warn_on_custom"),
    ],
)
def test_file_values_are_type_checked(tmp_path, monkeypatch, overrides, fragment):
    monkeypatch.delenv(ENV_INDENT, raising=False)
    path = tmp_path / "storage.json"
    path.write_text(json.dumps(overrides))
    with pytest.raises(ValueError, match=fragment):
        load_config(path)


def test_null_indent_is_allowed(tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_INDENT, "2")
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"indent": None}))
    assert load_config(path).indent is None


def test_non_integer_indent_env_is_rejected(monkeypatch):
    monkeypatch.setenv(ENV_INDENT, "wide")
    with pytest.raises(ValueError, match=ENV_INDENT):
        StorageConfig.from_env()
