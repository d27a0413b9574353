"""
Server configuration.
"""

from dataclasses import dataclass, field
from typing import Optional, List
import os


@dataclass
class ServerConfig:
    """Configuration for the DataMagic server."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False

    # API settings
    api_prefix: str = "/v1"
    docs_enabled: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # DataMagic settings file (YAML); defaults and environment when None
    settings_path: Optional[str] = None

    # Import data_path on startup
    import_on_start: bool = False

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("DATAMAGIC_HOST", "0.0.0.0"),
            port=int(os.getenv("DATAMAGIC_PORT", "8000")),
            workers=int(os.getenv("DATAMAGIC_WORKERS", "1")),
            api_prefix=os.getenv("DATAMAGIC_API_PREFIX", "/v1"),
            settings_path=os.getenv("DATAMAGIC_CONFIG"),
            import_on_start=os.getenv("DATAMAGIC_IMPORT_ON_START", "").lower() in ("1", "true", "yes"),
            log_level=os.getenv("DATAMAGIC_LOG_LEVEL", "INFO"),
        )
