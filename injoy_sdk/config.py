"""
Profile configuration.

Profiles are read from the CLI's YAML config file (``.aptos/config.yaml``)::

    profiles:
      default:
        network: Devnet
        private_key: "0x..."
        account: 4f5e...
        rest_url: "https://fullnode.devnet.aptoslabs.com"
        faucet_url: "https://faucet.devnet.aptoslabs.com"
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "INJOY_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path(".aptos") / "config.yaml"


class Profile(BaseModel):
    """A single named profile. Every field is optional until required."""
    network: Optional[str] = None
    rest_url: Optional[str] = None
    faucet_url: Optional[str] = None
    account: Optional[str] = None
    private_key: Optional[str] = None
    public_key: Optional[str] = None

    def require(self, field: str) -> str:
        """
        Get a field that must be present.

        Raises:
            ConfigError: If the field is missing or empty
        """
        value = getattr(self, field, None)
        if not value:
            raise ConfigError(f"'{field}' field not found")
        return value

    def redacted(self) -> Dict[str, Any]:
        """Profile contents safe for logging"""
        data = self.model_dump()
        if data.get("private_key"):
            data["private_key"] = f"[REDACTED - {len(data['private_key'])} chars]"
        return data

    def __repr__(self) -> str:
        return f"Profile({self.redacted()})"

    __str__ = __repr__


class AptosConfig:
    """Loader for the CLI profile file"""

    @staticmethod
    def config_path(path: Optional[Union[str, Path]] = None) -> Path:
        """Resolve the config file: explicit path, then $INJOY_CONFIG_PATH, then ./.aptos/config.yaml"""
        if path:
            return Path(path)
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)
        return DEFAULT_CONFIG_PATH

    @staticmethod
    def load(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        config_file = AptosConfig.config_path(path)
        try:
            with open(config_file, "r") as f:
                # BaseLoader keeps every scalar a string, so hex keys and addresses are not read as ints
                data = yaml.load(f, Loader=yaml.BaseLoader)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {config_file}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file {config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file {config_file}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("profiles"), dict):
            raise ConfigError(f"Config file {config_file} has no 'profiles' section")
        return data

    @staticmethod
    def load_profile(name: str = "default", path: Optional[Union[str, Path]] = None) -> Profile:
        """
        Load a named profile.

        Args:
            name: Profile name
            path: Optional config file path

        Returns:
            Parsed Profile

        Raises:
            ConfigError: If the file or profile is missing or malformed
        """
        profiles = AptosConfig.load(path)["profiles"]
        if name not in profiles:
            available = ", ".join(sorted(profiles)) or "none"
            raise ConfigError(f"Profile '{name}' not found. Available profiles: {available}")

        raw = profiles[name] or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Profile '{name}' must be a mapping")
        try:
            profile = Profile.model_validate(raw)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid profile '{name}': {e}") from e
        logger.debug(f"Loaded profile '{name}': {profile.redacted()}")
        return profile
