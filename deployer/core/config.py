# deployer/core/config.py

"""
Deployment configuration loading.

Sources, lowest to highest precedence:
    1. YAML/JSON configuration file
    2. DEPLOYER_* environment variables (a .env file is read first)
    3. inline `section.field=value` overrides
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import msgspec
import yaml
from dotenv import load_dotenv

from ..types.configs.deployment import DeploymentConfig
from ..types.errors import create_validation_error
from .logging import DeployerLogger, log_with_context


ENV_FIELDS = {
    "DEPLOYER_DFX_BINARY": ("dfx", "binary"),
    "DEPLOYER_NETWORK": ("dfx", "network"),
    "DEPLOYER_TIMEOUT": ("dfx", "timeout"),
    "DEPLOYER_WORKING_DIR": ("dfx", "working_dir"),
}


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader where only true/false are booleans; `yes`, `no`, `on` and `off` stay strings"""


ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != 'tag:yaml.org,2002:bool']
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ConfigLoader.add_implicit_resolver(
    'tag:yaml.org,2002:bool',
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF'),
)


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file into a dict"""
    config_path = Path(config_path)

    if not config_path.exists():
        raise create_validation_error(f"Config file not found: {config_path}",
                                      config_path=str(config_path))

    suffix = config_path.suffix.lower()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if suffix in ['.yaml', '.yml']:
                data = yaml.load(f, Loader=ConfigLoader)
            elif suffix == '.json':
                data = json.load(f)
            else:
                raise create_validation_error(f"Unsupported file type: {config_path.suffix}",
                                              config_path=str(config_path))
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise create_validation_error(f"Failed to parse config file: {e}",
                                      config_path=str(config_path))
    except UnicodeDecodeError as e:
        raise create_validation_error(f"Config file is not valid UTF-8: {e}",
                                      config_path=str(config_path))
    except OSError as e:
        raise create_validation_error(f"Cannot read config file: {e}",
                                      config_path=str(config_path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise create_validation_error("Config file must contain a mapping at the top level",
                                      config_path=str(config_path))
    return data


def _set_path(data: Dict[str, Any], path: Iterable[str], value: Any) -> None:
    keys = list(path)
    node = data
    for key in keys[:-1]:
        child = node.get(key)
        if child is None:
            child = node[key] = {}
        elif not isinstance(child, dict):
            raise create_validation_error(f"Cannot set '{'.'.join(keys)}': '{key}' is not a section",
                                          field='.'.join(keys))
        node = child
    node[keys[-1]] = value


def apply_overrides(data: Dict[str, Any], overrides: Iterable[str]) -> Dict[str, Any]:
    """
    Apply `dotted.path=value` overrides in place.

    Values are parsed as YAML scalars, so `ledger.decimals=9` sets an int and
    `ledger.feature_flags.icrc2=false` sets a bool.
    Quote a value to keep it a string, e.g. `ledger.token_symbol='"123"'`.
    """
    for override in overrides:
        if "=" not in override:
            raise create_validation_error(f"Override must look like key=value, got '{override}'",
                                          field=override)
        key, raw = override.split("=", 1)
        key = key.strip()
        if not key:
            raise create_validation_error(f"Override has an empty key: '{override}'")
        try:
            value = yaml.load(raw, Loader=ConfigLoader) if raw.strip() else ""
        except yaml.YAMLError:
            value = raw
        _set_path(data, key.split("."), value)
    return data


def apply_environment(data: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    for var, path in ENV_FIELDS.items():
        value = env.get(var)
        if value:
            if var == "DEPLOYER_TIMEOUT":
                try:
                    value = float(value)
                except ValueError:
                    raise create_validation_error(f"{var} must be a number, got '{value}'",
                                                  field="dfx.timeout")
            _set_path(data, path, value)
    return data


def convert_config(data: Dict[str, Any], config_path: Optional[str] = None) -> DeploymentConfig:
    try:
        config = msgspec.convert(data, type=DeploymentConfig)
    except msgspec.ValidationError as e:
        raise create_validation_error(f"Invalid configuration: {e}", config_path=config_path)

    config.validate()
    return config


def load_deployment_config(config_path: Optional[Path] = None,
                           overrides: Iterable[str] = (),
                           env: Optional[Mapping[str, str]] = None) -> DeploymentConfig:
    logger = DeployerLogger.get_logger('core.config')

    if env is None:
        load_dotenv()
        env = os.environ

    data: Dict[str, Any] = {}
    if config_path is not None:
        data = read_config_file(Path(config_path))
        log_with_context(logger, logging.INFO, "Loaded configuration file",
                         config_path=str(config_path))

    apply_environment(data, env)
    apply_overrides(data, overrides)

    config = convert_config(data, str(config_path) if config_path else None)

    log_with_context(logger, logging.DEBUG, "Configuration validated",
                     network=config.dfx.network,
                     config_path=str(config_path) if config_path else None)
    return config


def dump_config(config: DeploymentConfig) -> Dict[str, Any]:
    """Plain-dict form of a config, e.g. for `config show`"""
    return msgspec.to_builtins(config)


def log_level_from_env(env: Optional[Mapping[str, str]] = None, default: str = "INFO") -> str:
    env = os.environ if env is None else env
    level_name = env.get("DEPLOYER_LOG_LEVEL", default).upper()
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    return level_name if level_name in valid_levels else default
