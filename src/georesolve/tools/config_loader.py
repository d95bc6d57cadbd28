"""
Deployment profiles for georesolve.

A profile is a YAML document describing which providers to use, the
plausibility region, the cache and where API keys live. Two profiles ship
with the package (``nw-europe`` and ``worldwide``); any other YAML file can
be loaded by path.

Environment variables override a few frequently changed settings:

- GEORESOLVE_PROFILE: profile name or path used when none is given
- GEORESOLVE_VERBOSE: "1"/"true"/"yes" turns progress logging up
- GEORESOLVE_CACHE_PATH: cache file location
- GEORESOLVE_KEY_FILE: API key file location
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_PROFILE = "nw-europe"
PROFILE_ENV = "GEORESOLVE_PROFILE"

_TRUTHY = {"1", "true", "yes", "on"}

# env var -> (section, key); section None means top level
_ENV_OVERRIDES = {
    "GEORESOLVE_VERBOSE": (None, "verbose"),
    "GEORESOLVE_CACHE_PATH": ("cache", "path"),
    "GEORESOLVE_KEY_FILE": ("credentials", "file"),
}


class ConfigLoader:
    """Locate, read and override deployment profiles."""

    CONFIG_DIR = Path(__file__).parent.parent / "configs"

    @classmethod
    def available_profiles(cls) -> List[str]:
        return sorted(f.stem for f in cls.CONFIG_DIR.glob("*.yaml"))

    @classmethod
    def resolve_path(cls, profile: str) -> Path:
        """
        Turn a profile name or a YAML path into a file path.

        Raises:
            FileNotFoundError: If neither a bundled profile nor a file matches
        """
        candidate = Path(profile)
        if candidate.suffix in (".yaml", ".yml"):
            if candidate.is_file():
                return candidate
            raise FileNotFoundError(f"Profile file not found: {candidate}")

        bundled = cls.CONFIG_DIR / f"{profile}.yaml"
        if not bundled.is_file():
            raise FileNotFoundError(
                f"Profile '{profile}' not found. "
                f"Available profiles: {', '.join(cls.available_profiles())}"
            )
        return bundled

    @classmethod
    def load_profile(cls, profile: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Load a bundled profile by name, or any profile file by path.

        Raises:
            FileNotFoundError: If the profile does not exist
            ValueError: If the file does not hold a mapping
        """
        path = cls.resolve_path(profile)
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Profile {path} must contain a mapping, got {type(config).__name__}")
        return config

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        return os.getenv(PROFILE_ENV)

    @classmethod
    def load_default_or_env_profile(cls) -> Dict[str, Any]:
        """Profile named by GEORESOLVE_PROFILE (or the default) with env overrides applied."""
        profile = cls.get_profile_from_env() or DEFAULT_PROFILE
        return apply_env_overrides(cls.load_profile(profile))


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``config`` with GEORESOLVE_* settings applied."""
    result = copy.deepcopy(config)
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or not value.strip():
            continue
        if key == "verbose":
            parsed: Any = value.strip().lower() in _TRUTHY
        else:
            parsed = value.strip()

        if section is None:
            target = result
        else:
            if not isinstance(result.get(section), dict):
                result[section] = {}
            target = result[section]
        target[key] = parsed
    return result


def get_config() -> Dict[str, Any]:
    """Convenience function to get current configuration."""
    return ConfigLoader.load_default_or_env_profile()
