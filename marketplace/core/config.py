from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    database_url: str = Field("sqlite:///./marketplace.db")
    pool_size: int = Field(20)
    max_overflow: int = Field(30)
    pool_timeout: int = Field(60)  # seconds
    pool_recycle: int = Field(3600)  # Recycle connections every hour
    pool_pre_ping: bool = Field(True)


class CacheSettings(BaseSettings):
    # No URL means caching is off
    redis_url: Optional[str] = None
    ttl_seconds: int = 3600
    redis_socket_timeout: int = 5
    redis_socket_connect_timeout: int = 5
    redis_retry_on_timeout: bool = True


class AppSettings(BaseSettings):
    debug: bool = Field(False)
    allowed_hosts: str = Field("http://localhost:3000,http://localhost:8000")
    rate_limit_enabled: bool = Field(True)
    rate_limit_default: str = Field("300/minute")
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        env_nested_delimiter="__",
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def _split_allowed_hosts(cls, v: str) -> List[str]:
        if not v or not v.strip():
            return []
        hosts = []
        for host in v.split(","):
            host = host.strip().rstrip("/")
            if host.startswith(("http://", "https://")):
                hosts.append(host)
        return hosts

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Convert allowed_hosts string to list."""
        if not self.allowed_hosts:
            return ["http://localhost:3000", "http://localhost:8000"]
        return self._split_allowed_hosts(self.allowed_hosts)


settings: AppSettings = AppSettings()
