# ringprobe/configuration.py

"""
Configuration loader for ring.

Settings come from three layers: DEFAULT_CONFIG, an optional YAML file,
and explicit command-line values, later layers winning.
"""

import yaml
from typing import Dict, Any, List, Optional

from .parsing import parse_ports

DEFAULT_CONFIG: Dict[str, Any] = {
    'ports': '80',
    'count': 3,
    'timeout_ms': 2000,
    'ping': False,
    'ping_timeout_ms': 1000,
    'once': False,
    'json': False,
    'quiet': False,
    'scan_interval_seconds': 5,
    # Upper bound on probe tasks running at once; every target is still its own task.
    'max_workers': 256,
}


class ConfigurationError(ValueError):
    """Raised for configuration problems that must stop ring before any scan."""


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from a YAML file merged over DEFAULT_CONFIG.

    Without a path the defaults are returned.
    """
    config = DEFAULT_CONFIG.copy()
    if not path:
        return config
    try:
        with open(path, 'r') as f:
            user_config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file '{path}' does not exist.")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing '{path}': {e}")

    if user_config is None:
        return config
    if not isinstance(user_config, dict):
        raise ConfigurationError(f"'{path}' must contain a mapping of settings.")

    unknown = sorted(set(user_config) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigurationError(f"Unknown setting(s) in '{path}': {', '.join(unknown)}")
    config.update(user_config)
    return config


def save_config(config: Dict[str, Any], path: str):
    """Saves the provided configuration dictionary as YAML."""
    settings = {key: config[key] for key in DEFAULT_CONFIG if key in config}
    try:
        with open(path, 'w') as f:
            f.write("# ring configuration file\n")
            f.write("# Values given on the command line take precedence over these.\n\n")
            yaml.dump(settings, f, sort_keys=False, default_flow_style=False, indent=2)
    except IOError as e:
        raise ConfigurationError(f"Could not write config file to '{path}': {e}")


def build_config(overrides: Dict[str, Any], path: Optional[str] = None) -> Dict[str, Any]:
    """Layers explicitly given values (anything not None) over the file and defaults."""
    config = load_config(path)
    config.update({key: value for key, value in overrides.items() if value is not None})
    return config


def _number(config: Dict[str, Any], key: str, kind=int):
    value = config[key]
    kind_name = "whole number" if kind is int else "number"
    # int() would silently truncate 2.5 to 2
    if isinstance(value, bool) or (kind is int and isinstance(value, float)):
        raise ConfigurationError(f"Setting '{key}' must be a {kind_name}, got {value!r}.")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Setting '{key}' must be a {kind_name}, got {value!r}.")


def validate_config(hosts: List[str], config: Dict[str, Any]) -> List[int]:
    """
    Checks that a scan can run and returns the expanded port list.

    Raises ConfigurationError with a user-facing message otherwise.
    """
    if not hosts:
        raise ConfigurationError("You must provide at least one host!")

    ports = parse_ports(str(config['ports']))
    if not ports and not config['ping']:
        raise ConfigurationError("You must provide at least one port or enable --ping!")

    if _number(config, 'count') < 1:
        raise ConfigurationError("The attempt count must be at least 1.")
    if _number(config, 'timeout_ms') <= 0 or _number(config, 'ping_timeout_ms') <= 0:
        raise ConfigurationError("Timeouts must be positive numbers of milliseconds.")
    if _number(config, 'scan_interval_seconds', float) < 0:
        raise ConfigurationError("The scan interval cannot be negative.")
    if _number(config, 'max_workers') < 1:
        raise ConfigurationError("max_workers must be at least 1.")
    return ports
