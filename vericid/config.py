"""
Configuration management for VERICID

Loads settings from:
1. config/config.yaml (or the file named by VERICID_CONFIG_FILE)
2. Environment variables (.env, VERICID_ prefix)
3. Default values
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load environment variables
load_dotenv()

DEFAULT_CONFIG_FILE = Path("config/config.yaml")


class VericidSettings(BaseSettings):
    """VERICID configuration settings"""

    model_config = SettingsConfigDict(
        env_prefix="VERICID_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Hashing ---
    hash_algorithm: str = Field(default="sha2-256")
    hash_chunk_size: int = Field(default=65536, ge=1)

    # --- Provenance sources ---
    source_urls: str = ""  # Comma-separated string
    source_timeout: float = Field(default=10.0, gt=0)
    source_max_retries: int = Field(default=3, ge=1)
    source_retry_delay: float = Field(default=0.5, ge=0)
    fetch_max_workers: int = Field(default=4, ge=1)
    fetch_deadline: Optional[float] = None
    origin_index_path: Optional[Path] = None

    # --- API Settings ---
    api_key: str = ""
    cors_origins: str = "*"  # Comma-separated string

    # --- Logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @property
    def source_url_list(self) -> list[str]:
        """Parse comma-separated provenance source URLs."""
        return [u.strip() for u in self.source_urls.split(",") if u.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = DEFAULT_CONFIG_FILE) -> "VericidSettings":
        """Load configuration from YAML file, falling back to env/defaults"""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path, encoding="utf-8") as f:
            config_data: dict[str, Any] = yaml.safe_load(f) or {}

        return cls(**config_data)


# Global configuration instance
_config: Optional[VericidSettings] = None


def _config_file() -> Path:
    return Path(os.getenv("VERICID_CONFIG_FILE", str(DEFAULT_CONFIG_FILE)))


def get_config() -> VericidSettings:
    """Get or create global configuration instance"""
    global _config
    if _config is None:
        _config = VericidSettings.from_yaml(_config_file())
    return _config


def reload_config(yaml_path: Optional[str | Path] = None) -> VericidSettings:
    """Reload configuration from file"""
    global _config
    _config = VericidSettings.from_yaml(yaml_path or _config_file())
    return _config
