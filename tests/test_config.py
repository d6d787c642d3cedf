import pytest
import yaml

from flowengine import config
from flowengine.config import (
    Config,
    ConfigError,
    LogConfig,
    LogDestination,
    LogLevel,
    StepOutputLogConfig,
)

CASES = {
    "empty": (
        "",
        Config(
            type_hint_plugins=[],
            local_deployers={"image": {"deployer_name": "podman"}},
            log=LogConfig(LogLevel.INFO, LogDestination.STDOUT),
        ),
    ),
    "log-level": (
        "\nlog:\n  level: debug\n",
        Config(
            type_hint_plugins=[],
            local_deployers={"image": {"deployer_name": "podman"}},
            log=LogConfig(LogLevel.DEBUG, LogDestination.STDOUT),
        ),
    ),
    "type-kubernetes": (
        "\ndeployers:\n  image: \n    deployer_name: kubernetes\n",
        Config(
            type_hint_plugins=[],
            local_deployers={"image": {"deployer_name": "kubernetes"}},
            log=LogConfig(LogLevel.INFO, LogDestination.STDOUT),
        ),
    ),
    "plugins": (
        "\nplugins:\n  - quay.io/arcalot/example-plugin:latest\n",
        Config(
            type_hint_plugins=["quay.io/arcalot/example-plugin:latest"],
            local_deployers={"image": {"deployer_name": "podman"}},
            log=LogConfig(LogLevel.INFO, LogDestination.STDOUT),
        ),
    ),
}


@pytest.mark.parametrize("name", sorted(CASES))
def test_config_load(name):
    text, expected = CASES[name]
    assert config.load(yaml.safe_load(text)) == expected


def test_default_matches_empty_load():
    assert config.default() == config.load({})
    assert config.default().local_deployers == {"image": {"deployer_name": "podman"}}


def test_defaults_are_not_shared():
    first = config.default()
    first.local_deployers["image"]["deployer_name"] = "docker"
    assert config.default().local_deployers["image"]["deployer_name"] == "podman"


def test_logged_outputs():
    cfg = config.load({"logged_outputs": {"success": {"level": "debug"}, "error": {}}})
    assert cfg.logged_output_configs == {
        "success": StepOutputLogConfig(LogLevel.DEBUG),
        "error": StepOutputLogConfig(LogLevel.INFO),
    }


@pytest.mark.parametrize(
    "data",
    [
        {"log": {"level": "verbose"}},
        {"log": {"destination": "stderr"}},
        {"plugins": [""]},
        {"plugins": "not-a-list"},
        {"logged_outputs": {"bad key!": {"level": "info"}}},
        {"logged_outputs": {"success": {"level": "loud"}}},
        {"unknown": 1},
        ["a", "list"],
    ],
)
def test_invalid_config(data):
    with pytest.raises(ConfigError):
        config.load(data)