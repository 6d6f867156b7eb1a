"""
Configuration management for memfs.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/memfs/config.json
- Fallback: ~/.memfs/config.json
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, field

logger = logging.getLogger(__name__)


@dataclass
class ShellConfig:
    """Interactive shell options."""
    history_file: Optional[str] = "~/.memfs_history"
    prompt_style: str = "ansicyan bold"
    color: bool = True


@dataclass
class StoreConfig:
    """Saved state settings."""
    state_file: str = "filesystem_state.json"
    load_on_start: bool = False


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False


@dataclass
class MemFSConfig:
    """Main memfs configuration."""
    shell: ShellConfig = field(default_factory=ShellConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "shell": asdict(self.shell),
            "store": asdict(self.store),
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MemFSConfig':
        """Create from dictionary."""
        shell_data = data.get("shell", {})
        store_data = data.get("store", {})
        cli_data = data.get("cli", {})
        return cls(
            shell=ShellConfig(**shell_data),
            store=StoreConfig(**store_data),
            cli=CLIConfig(**cli_data),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. ~/.config/memfs/config.json
    2. Fallback: ~/.memfs/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "memfs"
    else:
        config_dir = Path.home() / ".memfs"

    return config_dir / "config.json"


def load_config() -> MemFSConfig:
    """
    Load configuration from file.

    Returns:
        MemFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return MemFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return MemFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError, AttributeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return MemFSConfig()


def save_config(config: MemFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(MemFSConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    # Shell settings
    shell_history_file: Optional[str] = None,
    shell_prompt_style: Optional[str] = None,
    shell_color: Optional[bool] = None,
    # Store settings
    store_state_file: Optional[str] = None,
    store_load_on_start: Optional[bool] = None,
    # CLI settings
    cli_verbose: Optional[bool] = None,
) -> MemFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Returns:
        The saved configuration
    """
    config = load_config()

    # Update shell config
    if shell_history_file is not None:
        config.shell.history_file = shell_history_file
    if shell_prompt_style is not None:
        config.shell.prompt_style = shell_prompt_style
    if shell_color is not None:
        config.shell.color = shell_color

    # Update store config
    if store_state_file is not None:
        config.store.state_file = store_state_file
    if store_load_on_start is not None:
        config.store.load_on_start = store_load_on_start

    # Update CLI config
    if cli_verbose is not None:
        config.cli.verbose = cli_verbose

    save_config(config)
    return config
