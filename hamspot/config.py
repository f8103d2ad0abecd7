"""Configuration settings for hamspot."""

from typing import Annotated, List, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

ENV_PREFIX = "HAM_DISCORD_SPOTTING_BOT_"


def _env(name: str) -> str:
    return ENV_PREFIX + name


def _split_csv(value):
    if isinstance(value, str):
        return [item.strip() for item in value.split(",")]
    return value


def parse_listen_addr(addr: str) -> Optional[Tuple[str, int]]:
    """Split ``host:port`` or ``:port`` into (host, port); None when malformed."""
    host, sep, port = addr.strip().rpartition(":")
    if not sep or not port.isdigit() or not 0 < int(port) < 65536:
        return None
    return host or "0.0.0.0", int(port)


class EnvSettings(BaseSettings):
    """Settings group read from the environment and the .env file."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class ServerSettings(EnvSettings):
    listen_addr: str = Field(":38080", validation_alias=_env("LISTENADDR"))
    webhook_path: str = Field("/webhook/hamalert", validation_alias=_env("HAMALERT_HOOK"))
    max_inflight: int = Field(32, validation_alias=_env("WEBHOOK_CONCURRENCY"))
    max_pending: int = Field(1000, ge=1, validation_alias=_env("WEBHOOK_BACKLOG"))

    @field_validator("webhook_path")
    @classmethod
    def _leading_slash(cls, v: str) -> str:
        v = v.strip() or "/webhook/hamalert"
        return v if v.startswith("/") else "/" + v

    @property
    def bind(self) -> Tuple[str, int]:
        """Listen address as (host, port); an empty host binds all interfaces."""
        bind = parse_listen_addr(self.listen_addr)
        if bind is None:
            raise ValueError(f"Invalid listen address: {self.listen_addr!r}")
        return bind


class DiscordSettings(EnvSettings):
    token: str = Field("", validation_alias=_env("TOKEN"))
    channel: str = Field("", validation_alias=_env("CHANNEL"))
    guild: Optional[str] = Field(None, validation_alias=_env("GUILD"))
    api_base: str = Field("https://discord.com/api/v10", validation_alias=_env("DISCORD_API"))


class POTASettings(EnvSettings):
    url: str = Field("https://api.pota.app/spot/", validation_alias=_env("POTA_URL"))
    poll_interval: float = Field(60, validation_alias=_env("POTA_INTERVAL"))
    max_spots: int = Field(100, validation_alias=_env("POTA_MAX_SPOTS"))
    timeout: float = Field(30, validation_alias=_env("POTA_TIMEOUT"))


class DedupSettings(EnvSettings):
    # Spots expire after 4 hours
    ttl: float = Field(4 * 60 * 60, validation_alias=_env("SPOT_TTL"))


class FilterSettings(EnvSettings):
    max_frequency: int = Field(54_000_000, validation_alias=_env("MAX_FREQUENCY"))
    modes: Annotated[List[str], NoDecode] = Field(
        ["ssb", "phone", "lsb", "usb", ""], validation_alias=_env("MODES")
    )

    @field_validator("modes", mode="before")
    @classmethod
    def _parse_modes(cls, v):
        return [m.lower() for m in _split_csv(v)]


class MemberSettings(EnvSettings):
    callsigns: Annotated[List[str], NoDecode] = Field(
        ["W3LBY"], validation_alias=_env("MEMBER_CALLSIGNS")
    )
    refresh_interval: float = Field(60 * 60, validation_alias=_env("MEMBER_REFRESH"))

    @field_validator("callsigns", mode="before")
    @classmethod
    def _parse_callsigns(cls, v):
        return [c.upper() for c in _split_csv(v) if c]


class DispatcherSettings(EnvSettings):
    idle_interval: float = Field(0.1, validation_alias=_env("DISPATCH_IDLE"))
    max_attempts: int = Field(1, ge=1, validation_alias=_env("SEND_ATTEMPTS"))
    backoff_base: float = Field(1.0, validation_alias=_env("SEND_BACKOFF"))


class StoreSettings(EnvSettings):
    redis_addr: Optional[str] = Field(None, validation_alias=_env("REDIS_ADDR"))

    @property
    def redis_url(self) -> Optional[str]:
        if not self.redis_addr:
            return None
        if "://" in self.redis_addr:
            return self.redis_addr
        return f"redis://{self.redis_addr}"


class Settings(BaseSettings):
    """Global Application Settings."""
    server: ServerSettings = Field(default_factory=ServerSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    pota: POTASettings = Field(default_factory=POTASettings)
    dedup: DedupSettings = Field(default_factory=DedupSettings)
    filters: FilterSettings = Field(default_factory=FilterSettings)
    members: MemberSettings = Field(default_factory=MemberSettings)
    dispatcher: DispatcherSettings = Field(default_factory=DispatcherSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)

    log_level: str = Field("INFO", validation_alias=_env("LOG_LEVEL"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore"
    )

    def missing_required(self) -> List[str]:
        """Names of required environment variables that are unset."""
        missing = []
        if not self.discord.token:
            missing.append(_env("TOKEN"))
        if not self.discord.channel:
            missing.append(_env("CHANNEL"))
        return missing

    def invalid_options(self) -> List[str]:
        """Messages for options that are set but unusable."""
        invalid = []
        if parse_listen_addr(self.server.listen_addr) is None:
            invalid.append(f"{_env('LISTENADDR')}={self.server.listen_addr!r} is not a host:port address")
        return invalid


settings = Settings()
