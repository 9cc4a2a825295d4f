"""
Configuration management for the cleanup tool.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import yaml
import os
import logging
from platformdirs import user_config_dir

APP_NAME = "action-cleanup"
LOCAL_CONFIG_NAME = "action-cleanup.yaml"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default_config.yaml"


@dataclass
class ScanConfig:
    action_dirs: List[str] = None
    markup_patterns: List[str] = None
    structured_patterns: List[str] = None
    script_patterns: List[str] = None
    exclude_patterns: List[str] = None
    routes_file: str = "app/config/routes.json"
    max_depth: int = 64

    def __post_init__(self):
        # Set default values if not provided
        if self.action_dirs is None:
            self.action_dirs = ["app/api", "app/lib"]
        if self.markup_patterns is None:
            self.markup_patterns = [
                "views/**/*.html",
                "views/**/*.ejs",
                "public/**/*.html",
                "public/**/*.ejs",
            ]
        if self.structured_patterns is None:
            self.structured_patterns = ["app/**/*.json"]
        if self.script_patterns is None:
            self.script_patterns = [
                "public/**/*.js",
                "views/**/*.js",
                "extensions/**/*.js",
            ]
        if self.exclude_patterns is None:
            self.exclude_patterns = ["node_modules/", ".git/"]


@dataclass
class IgnoreConfig:
    directory: str = ".action-cleanup"
    actions_file: str = "ignore-list.json"
    routes_file: str = "ignored-routes.json"

    def resolve(self, project_root: Path, file_name: str) -> Path:
        """Location of an ignore file for the given project."""
        directory = Path(os.path.expanduser(self.directory))
        if not directory.is_absolute():
            directory = Path(project_root) / directory
        return directory / file_name


@dataclass
class DeleteConfig:
    backup_dir: Optional[str] = None

    def __post_init__(self):
        # Expand ~ to home directory in backup_dir
        if self.backup_dir:
            self.backup_dir = os.path.expanduser(self.backup_dir)


@dataclass
class CleanupConfig:
    name: str = "Server Action Cleanup"
    log_level: str = "info"
    host: str = "localhost"
    port: int = 8080
    scan: ScanConfig = None
    ignore: IgnoreConfig = None
    delete: DeleteConfig = None

    def __post_init__(self):
        if self.scan is None:
            self.scan = ScanConfig()
        if self.ignore is None:
            self.ignore = IgnoreConfig()
        if self.delete is None:
            self.delete = DeleteConfig()


def get_config_search_paths() -> List[str]:
    """Get list of paths to search for config file."""
    return [
        f"./{LOCAL_CONFIG_NAME}",
        str(Path(user_config_dir(APP_NAME)) / "config.yaml"),
        str(DEFAULT_CONFIG_PATH),
    ]


def load_config(config_path: Optional[str] = None) -> CleanupConfig:
    """Load configuration from YAML file."""
    logger = logging.getLogger(__name__)

    # If config_path is explicitly provided, only try that one
    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file not found: {config_path}")
        search_paths = [config_path]
    else:
        search_paths = get_config_search_paths()

    for path in search_paths:
        abs_path = os.path.abspath(path)
        if not os.path.exists(abs_path):
            continue

        logger.info(f"Loading configuration from {abs_path}")
        with open(abs_path, "r") as f:
            config_data = yaml.safe_load(f)

        if not config_data:
            logger.warning(f"Config file {abs_path} is empty, trying next location")
            continue

        logger.debug(f"Loaded configuration data: {config_data}")

        # Convert nested dictionaries to appropriate config objects
        if "scan" in config_data and isinstance(config_data["scan"], dict):
            config_data["scan"] = ScanConfig(**config_data["scan"])

        if "ignore" in config_data and isinstance(config_data["ignore"], dict):
            config_data["ignore"] = IgnoreConfig(**config_data["ignore"])

        if "delete" in config_data and isinstance(config_data["delete"], dict):
            config_data["delete"] = DeleteConfig(**config_data["delete"])

        return CleanupConfig(**config_data)

    logger.debug(f"No config found in: {', '.join(search_paths)}, using defaults")
    return CleanupConfig()
