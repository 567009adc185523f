"""Global configuration — XDG paths, config file, env vars, defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_CONFIG_FILENAME = "config.yaml"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sqlaudit"
    return Path.home() / ".config" / "sqlaudit"


@dataclass
class SqlAuditConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    server_url: str = "http://127.0.0.1:8080"
    timeout: float = 30.0
    download_dir: Path = field(default_factory=Path.cwd)
    web_host: str = "127.0.0.1"  # Hardcoded — never 0.0.0.0
    web_port: int = 8471
    verbose: bool = False

    @classmethod
    def load(cls) -> SqlAuditConfig:
        """Load config from config.yaml and environment variables with XDG defaults."""
        config = cls()

        config_file = config.config_dir / _CONFIG_FILENAME
        if config_file.is_file():
            config._apply_file(config_file)

        env_server = os.environ.get("SQLAUDIT_SERVER_URL")
        if env_server:
            config.server_url = env_server

        env_timeout = os.environ.get("SQLAUDIT_TIMEOUT")
        if env_timeout:
            config.timeout = float(env_timeout)

        env_download = os.environ.get("SQLAUDIT_DOWNLOAD_DIR")
        if env_download:
            config.download_dir = Path(env_download)

        env_port = os.environ.get("SQLAUDIT_WEB_PORT")
        if env_port:
            config.web_port = int(env_port)

        return config

    def _apply_file(self, path: Path) -> None:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if data is None:
            return
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must be a mapping")

        if "server_url" in data:
            self.server_url = str(data["server_url"])
        if "timeout" in data:
            self.timeout = float(data["timeout"])
        if "download_dir" in data:
            self.download_dir = Path(data["download_dir"]).expanduser()
        if "web_port" in data:
            self.web_port = int(data["web_port"])
        logger.debug("Loaded configuration from %s", path)
