"""Config loading and saving for zenreview"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from zenreview.models.config import ZenConfig


# Config lives in .zenreview/config.yaml in current working directory
CONFIG_DIR = Path(".zenreview")
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class ConfigNotFoundError(Exception):
    """Raised when config file doesn't exist"""

    pass


class ConfigInvalidError(Exception):
    """Raised when config file is invalid"""

    pass


def get_config_path() -> Path:
    """Get the config file path (relative to cwd)"""
    return CONFIG_FILE


def config_exists() -> bool:
    """Check if config file exists"""
    return CONFIG_FILE.exists()


def load_config() -> ZenConfig:
    """Load config from .zenreview/config.yaml

    Raises:
        ConfigNotFoundError: If config file doesn't exist
        ConfigInvalidError: If config file is invalid
    """
    if not CONFIG_FILE.exists():
        raise ConfigNotFoundError(
            f"Config file not found at {CONFIG_FILE}\n"
            f"Run 'zenreview init' to create one."
        )

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            raise ConfigInvalidError(f"Config file is empty: {CONFIG_FILE}")

        return ZenConfig.model_validate(data)

    except yaml.YAMLError as e:
        raise ConfigInvalidError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ConfigInvalidError(f"Invalid config: {e}")


def load_config_or_default() -> ZenConfig:
    """Load the config, or defaults when no config file exists yet"""
    if not config_exists():
        return ZenConfig()
    return load_config()


def save_config(config: ZenConfig) -> Path:
    """Save config to .zenreview/config.yaml"""
    CONFIG_DIR.mkdir(exist_ok=True)

    data = config.model_dump(mode="json")

    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return CONFIG_FILE


def create_config(**values) -> ZenConfig:
    """Create and save a new config"""
    config = ZenConfig(**values)
    save_config(config)
    return config


def add_to_whitelist(word: str) -> ZenConfig:
    """Persist a whitelisted word; blank or duplicate words are ignored"""
    config = load_config_or_default()
    data = config.model_dump()
    data["whitelist"] = config.whitelist + [word]
    config = ZenConfig.model_validate(data)
    save_config(config)
    return config


def remove_from_whitelist(word: str) -> bool:
    """Remove a whitelisted word. Returns False if it was not listed"""
    config = load_config_or_default()
    word = word.strip()
    if word not in config.whitelist:
        return False
    config = config.model_copy(update={"whitelist": [w for w in config.whitelist if w != word]})
    save_config(config)
    return True
