"""
Tests for profile loading.
"""
import pytest
import yaml

from injoy_sdk.config import CONFIG_PATH_ENV, AptosConfig, Profile
from injoy_sdk.exceptions import ConfigError
from tests.test_helpers import TEST_PRIV_KEY

CONFIG_YAML = f"""---
profiles:
  default:
    network: Devnet
    private_key: {TEST_PRIV_KEY}
    account: 00000000000000000000000000000000000000000000000000000000000000a1
    rest_url: "https://fullnode.devnet.example.com"
    faucet_url: "https://faucet.devnet.example.com"
  partial:
    rest_url: "https://fullnode.devnet.example.com"
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


def test_load_default_profile(config_file):
    profile = AptosConfig.load_profile("default", config_file)
    assert profile.network == "Devnet"
    # Unquoted hex must stay a string
    assert profile.private_key == TEST_PRIV_KEY
    assert profile.account.endswith("a1")


def test_config_path_from_environment(config_file, monkeypatch):
    monkeypatch.setenv(CONFIG_PATH_ENV, str(config_file))
    assert AptosConfig.load_profile().rest_url == "https://fullnode.devnet.example.com"


def test_require_missing_field(config_file):
    profile = AptosConfig.load_profile("partial", config_file)
    assert profile.require("rest_url")
    with pytest.raises(ConfigError, match="'private_key' field not found"):
        profile.require("private_key")


def test_unknown_profile(config_file):
    with pytest.raises(ConfigError, match="Available profiles: default, partial"):
        AptosConfig.load_profile("mainnet", config_file)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found") as excinfo:
        AptosConfig.load_profile("default", tmp_path / "nope.yaml")
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("profiles: [unclosed")
    with pytest.raises(ConfigError, match="Failed to parse") as excinfo:
        AptosConfig.load_profile("default", path)
    assert isinstance(excinfo.value.__cause__, yaml.YAMLError)


def test_no_profiles_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("something: else\n")
    with pytest.raises(ConfigError, match="no 'profiles' section"):
        AptosConfig.load_profile("default", path)


def test_profile_repr_redacts_private_key():
    profile = Profile(private_key=TEST_PRIV_KEY, account="0xA1")
    assert TEST_PRIV_KEY not in repr(profile)
    assert "REDACTED" in str(profile)
