"""
Configuration management for NetDeploy.

Handles:
- API server settings
- Client settings for the CLI
- Data directory location

Device state itself is never written to disk.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_DATA_DIR = Path.home() / ".netdeploy"

DEFAULT_API_PORT = 8080
DEFAULT_CLIENT_TIMEOUT = 10.0

# Mount point of the device routes
API_PREFIX = "/api/v1/network-deployment"


@dataclass
class ServerConfig:
    """Configuration for the API server."""
    host: str = "0.0.0.0"
    port: int = DEFAULT_API_PORT
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    debug: bool = False

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "cors_origins": self.cors_origins,
            "debug": self.debug
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ServerConfig":
        # Filter to only known fields to handle config evolution
        known_fields = {"host", "port", "cors_origins", "debug"}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered)


@dataclass
class Config:
    """
    Main NetDeploy configuration.

    Stored at ~/.netdeploy/config.json
    """
    # Paths
    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)

    server: ServerConfig = field(default_factory=ServerConfig)

    # Seconds the CLI waits for the API
    client_timeout: float = DEFAULT_CLIENT_TIMEOUT

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.json"

    def ensure_data_dir(self) -> None:
        """Create data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def save(self) -> None:
        """Save configuration to disk."""
        self.ensure_data_dir()

        data = {
            "server": self.server.to_dict(),
            "client_timeout": self.client_timeout,
        }

        with open(self.config_path, 'w') as f:
            json.dump(data, f, indent=2)

        logger.debug(f"Configuration saved to {self.config_path}")

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> "Config":
        """Load configuration from disk."""
        data_dir = data_dir or DEFAULT_DATA_DIR
        config_path = data_dir / "config.json"

        if not config_path.exists():
            return cls(data_dir=data_dir)

        with open(config_path, 'r') as f:
            data = json.load(f)

        config = cls(
            data_dir=data_dir,
            client_timeout=data.get("client_timeout", DEFAULT_CLIENT_TIMEOUT),
        )

        if "server" in data:
            config.server = ServerConfig.from_dict(data["server"])

        return config

    @classmethod
    def exists(cls, data_dir: Optional[Path] = None) -> bool:
        """Check if configuration exists."""
        data_dir = data_dir or DEFAULT_DATA_DIR
        return (data_dir / "config.json").exists()


# Global config instance
_config: Optional[Config] = None


def get_config(data_dir: Optional[Path] = None) -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load(data_dir)
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
