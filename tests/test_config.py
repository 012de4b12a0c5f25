import pytest

from hypibole.config import ConfigError, ServiceConfig, load_config, parse_config


def test_load_full_config(tmp_path):
    path = tmp_path / "hypibole.yaml"
    path.write_text(
        "network:\n"
        "  address: 127.0.0.1\n"
        "  port: 9000\n"
        "board:\n"
        "  gets: '1,2'\n"
        "  sets: 2\n"
        "  simgets: [5, 6]\n"
        "  simsets: ''\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.address == "127.0.0.1"
    assert config.port == "9000"
    assert config.board == {"gets": "1,2", "sets": "2", "simgets": "5,6", "simsets": ""}
    assert config.to_args() == [
        "--address", "127.0.0.1",
        "--port", "9000",
        "--gets", "1,2",
        "--sets", "2",
        "--simgets", "5,6",
        "--simsets", "",
    ]


def test_sections_and_keys_are_optional():
    assert parse_config(None).to_args() == []
    assert parse_config({"board": {"sets": "3"}}).to_args() == ["--sets", "3"]
    assert parse_config({"network": None}).to_args() == []


@pytest.mark.parametrize(
    "data",
    [
        ["not", "a", "mapping"],
        {"gpio": {}},
        {"board": {"pins": "1"}},
        {"network": "0.0.0.0"},
        {"network": {"port": True}},
        {"board": {"gets": [1, "two"]}},
        {"board": {"gets": 1.5}},
    ],
)
def test_invalid_config(data):
    with pytest.raises(ConfigError):
        parse_config(data)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Unable to read"):
        load_config(tmp_path / "missing.yaml")


def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("network: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(path)


def test_empty_service_config_defaults():
    config = ServiceConfig()
    assert config.address is None and config.port is None
