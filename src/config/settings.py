"""
Configuration settings for the Users Backend
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_ORIGINS = "http://localhost:8000,http://localhost:5173"

TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_origins(raw: str) -> List[str]:
    """Split a comma separated origin list, keeping a bare wildcard as-is"""
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    if "*" in origins:
        return ["*"]
    return origins


def _parse_bool(raw: Optional[str], default: bool = False) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in TRUE_VALUES


def _parse_optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass
class Settings:
    """Runtime configuration read from the environment"""

    database_url: Optional[str] = None
    database_key: str = ""
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: List[str] = field(default_factory=lambda: _parse_origins(DEFAULT_ALLOWED_ORIGINS))
    log_level: str = "INFO"
    strict_not_found: bool = False
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_command_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from process environment variables"""
        return cls(
            database_url=os.getenv("SUPABASE_URL") or os.getenv("DATABASE_URL"),
            database_key=os.getenv("SUPABASE_KEY", ""),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8000)),
            allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            strict_not_found=_parse_bool(os.getenv("STRICT_NOT_FOUND")),
            db_pool_min_size=int(os.getenv("DB_POOL_MIN_SIZE", 1)),
            db_pool_max_size=int(os.getenv("DB_POOL_MAX_SIZE", 10)),
            db_command_timeout=_parse_optional_float(os.getenv("DB_COMMAND_TIMEOUT")),
        )

    @property
    def allow_all_origins(self) -> bool:
        return self.allowed_origins == ["*"]

    def validate(self):
        """Fail fast on configuration the server cannot start without"""
        if not self.database_url:
            raise ValueError("SUPABASE_URL (or DATABASE_URL) environment variable is required")
        if not self.database_key:
            logger.warning("SUPABASE_KEY not set - relying on credentials embedded in the database URL")
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError("DB_POOL_MIN_SIZE cannot be greater than DB_POOL_MAX_SIZE")


def configure_logging(level: str = "INFO"):
    """Configure root logging once for the process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
