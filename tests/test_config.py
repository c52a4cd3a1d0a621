import pytest
import yaml

from huffpack.config_loader import load_config, validate_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HUFFPACK_CONFIG", "HUFFPACK_BUFFER_SIZE",
                 "HUFFPACK_DEGENERATE_POLICY", "HUFFPACK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_packaged_defaults():
    config = load_config()
    assert config["codec"]["buffer_size"] == 0x20000
    assert config["codec"]["degenerate_policy"] == "one-bit"
    assert config["server"]["port"] == 4000


def test_yaml_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("codec:\n  buffer_size: 64\n  degenerate_policy: reject\n")
    config = load_config(str(path))
    assert config["codec"] == {"buffer_size": 64, "degenerate_policy": "reject"}
    assert config["logging"]["level"] == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HUFFPACK_BUFFER_SIZE", "512")
    monkeypatch.setenv("HUFFPACK_DEGENERATE_POLICY", "reject")
    config = load_config()
    assert config["codec"]["buffer_size"] == 512
    assert config["codec"]["degenerate_policy"] == "reject"


def test_config_path_from_environment(monkeypatch, tmp_path):
    path = tmp_path / "env.yaml"
    path.write_text("server:\n  port: 9000\n")
    monkeypatch.setenv("HUFFPACK_CONFIG", str(path))
    assert load_config()["server"]["port"] == 9000


@pytest.mark.parametrize("codec", [
    {"buffer_size": 0},
    {"buffer_size": "big"},
    {"degenerate_policy": "repeat"},
])
def test_invalid_codec_settings(codec):
    with pytest.raises(ValueError):
        validate_config({"codec": codec})


def test_empty_sections_get_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("codec:\nlogging:\nserver:\n")
    config = load_config(str(path))
    assert config["codec"]["buffer_size"] == 0x20000
    assert config["server"]["port"] == 4000


def test_empty_section_with_environment_override(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("codec:\n")
    monkeypatch.setenv("HUFFPACK_BUFFER_SIZE", "256")
    assert load_config(str(path))["codec"]["buffer_size"] == 256


@pytest.mark.parametrize("text", ["- just\n- a list\n", "codec: 12\n", "server: [1, 2]\n"])
def test_non_mapping_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    with pytest.raises(ValueError):
        load_config(str(path))


def test_malformed_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("codec: [unclosed\n")
    with pytest.raises(yaml.YAMLError):
        load_config(str(path))
