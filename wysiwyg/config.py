import os
import yaml
from pathlib import Path
from typing import Any, Dict
from dotenv import dotenv_values, find_dotenv
import logging

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Native Windows WYSIWYG"


def get_package_root() -> Path:
    """Get the directory holding the package and its bundled config.yaml.

    Returns:
        Path to the package directory
    """
    return Path(__file__).parent


def get_config() -> Dict[str, Any]:
    """Get configuration by merging config.yaml and environment variables.
    Environment variables from .env take precedence over config.yaml values.

    Returns:
        Dictionary containing merged configuration
    """
    # Load config file
    config_path = Path(
        os.getenv("WYSIWYG_CONFIG_PATH", str(get_package_root() / "config.yaml"))
    )
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    # Load environment variables from .env file
    dotenv_path = find_dotenv(usecwd=True)
    if not dotenv_path:
        logger.debug("No .env file found")
    else:
        env_vars = dotenv_values(dotenv_path)
        # Environment variables take precedence over config file
        config.update(env_vars)

    return config  # type: ignore[no-any-return]


def get_app_title(config: dict) -> str:
    """Base window title used by the shell when no project is loaded."""
    return str(config.get("app", {}).get("title", DEFAULT_TITLE))


def get_manifest_params(config: dict) -> dict:
    """Get manifest parameters from config with defaults.

    Args:
        config: Config dictionary containing a `manifest` section

    Returns:
        Dictionary with the following keys:
        - file_name: Manifest file name under the project root (default: Cargo.toml)
        - dependency_marker: Header after which dependencies are spliced (default: [dependencies])
    """
    manifest = config.get("manifest", {})
    return {
        "file_name": manifest.get("file_name", "Cargo.toml"),
        "dependency_marker": manifest.get("dependency_marker", "[dependencies]"),
    }


def get_build_tool_params(config: dict) -> dict:
    """Get the bootstrap command of the external build tool.

    Returns:
        Dictionary with `program` (default: cargo) and `init_args`
        (default: ["init", "--bin"])
    """
    build_tool = config.get("build_tool", {})
    return {
        "program": build_tool.get("program", "cargo"),
        "init_args": list(build_tool.get("init_args", ["init", "--bin"])),
    }


def get_required_dependencies(config: dict) -> Dict[str, str]:
    """Dependencies every designer project must declare, name -> version."""
    deps = config.get("required_dependencies")
    if deps is None:
        deps = {"native-windows-gui": "~1.0", "native-windows-derive": "~1.0"}
    return {str(name): str(version) for name, version in deps.items()}


def get_scanner_params(config: dict) -> dict:
    """Get source scanner parameters from config with defaults."""
    scanner = config.get("scanner", {})
    return {
        "source_dir": scanner.get("source_dir", "src"),
        "extension": scanner.get("extension", ".rs"),
        "derive_marker": scanner.get("derive_marker", "NwgUi"),
    }
