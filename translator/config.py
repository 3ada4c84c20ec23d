from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .utils.dict_utils import deep_merge
from .utils.env_config import apply_env_overrides

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""


@dataclass
class SystemConfig:
    log_level: str = "INFO"

    def to_dict(self) -> Dict:
        return {"log_level": self.log_level}


@dataclass
class OrchestratorConfig:
    # Quiet period before a request is issued; cloud mode waits longer to save quota.
    local_debounce_ms: int = 200
    cloud_debounce_ms: int = 500
    error_notice: str = "Error translating text."

    def debounce_ms(self, cloud: bool) -> int:
        return self.cloud_debounce_ms if cloud else self.local_debounce_ms

    def to_dict(self) -> Dict:
        return {
            "local_debounce_ms": self.local_debounce_ms,
            "cloud_debounce_ms": self.cloud_debounce_ms,
            "error_notice": self.error_notice,
        }


@dataclass
class PlaybackConfig:
    sample_rate_hz: int = 24_000
    channels: int = 1
    device: Optional[str] = None
    speaking_notice: str = "Speaking..."
    error_notice: str = "Error generating speech."

    def to_dict(self) -> Dict:
        return {
            "sample_rate_hz": self.sample_rate_hz,
            "channels": self.channels,
            "device": self.device,
            "speaking_notice": self.speaking_notice,
            "error_notice": self.error_notice,
        }


@dataclass
class NoticeConfig:
    default_ttl_ms: int = 3_000
    short_ttl_ms: int = 2_000

    def to_dict(self) -> Dict:
        return {"default_ttl_ms": self.default_ttl_ms, "short_ttl_ms": self.short_ttl_ms}


@dataclass
class HistoryConfig:
    max_entries: int = 50
    local_path: str = "~/.translator/state.json"
    local_key: str = "translation_history"
    require_identity: bool = False

    def resolved_local_path(self) -> Path:
        return Path(self.local_path).expanduser()

    def to_dict(self) -> Dict:
        return {
            "max_entries": self.max_entries,
            "local_path": self.local_path,
            "local_key": self.local_key,
            "require_identity": self.require_identity,
        }


@dataclass
class StorageConfig:
    connection_string: str = "mongodb://localhost:27017"
    database: str = "translator"
    collection: str = "history"

    def to_dict(self) -> Dict:
        return {
            "connection_string": self.connection_string,
            "database": self.database,
            "collection": self.collection,
        }


@dataclass
class ProviderConfig:
    type: str = "mock"
    model: Optional[str] = None
    api_key: Optional[str] = None
    endpoint: Optional[str] = None
    api_version: Optional[str] = None
    voice: Optional[str] = None
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ProviderConfig":
        data = data or {}
        return cls(
            type=data.get("type", "mock"),
            model=data.get("model"),
            api_key=data.get("api_key"),
            endpoint=data.get("endpoint"),
            api_version=data.get("api_version"),
            voice=data.get("voice"),
            settings=data.get("settings", {}) or {},
        )

    def to_dict(self) -> Dict:
        return {
            "type": self.type,
            "model": self.model,
            "api_key": self.api_key,
            "endpoint": self.endpoint,
            "api_version": self.api_version,
            "voice": self.voice,
            "settings": dict(self.settings),
        }


@dataclass
class ProvidersConfig:
    translation: ProviderConfig = field(default_factory=ProviderConfig)
    speech: ProviderConfig = field(default_factory=ProviderConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Dict]]) -> "ProvidersConfig":
        data = data or {}
        return cls(
            translation=ProviderConfig.from_dict(data.get("translation")),
            speech=ProviderConfig.from_dict(data.get("speech")),
        )

    def to_dict(self) -> Dict:
        return {"translation": self.translation.to_dict(), "speech": self.speech.to_dict()}


@dataclass
class Config:
    system: SystemConfig = field(default_factory=SystemConfig)
    orchestrator: OrchestratorConfig = field(default_factory=OrchestratorConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    notices: NoticeConfig = field(default_factory=NoticeConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)

    def to_dict(self) -> Dict:
        return {
            "system": self.system.to_dict(),
            "orchestrator": self.orchestrator.to_dict(),
            "playback": self.playback.to_dict(),
            "notices": self.notices.to_dict(),
            "history": self.history.to_dict(),
            "storage": self.storage.to_dict(),
            "providers": self.providers.to_dict(),
        }

    @classmethod
    def load(cls, paths: Optional[list[Path]] = None) -> "Config":
        """Merge YAML files over the defaults, then apply ``TR_*`` environment overrides."""
        merged = cls._merge_yaml(paths or [])
        return cls.from_dict(apply_env_overrides(merged))

    @classmethod
    def from_yaml(cls, paths: list[Path]) -> "Config":
        """Load and merge multiple YAML config files.

        Configs are merged left-to-right, with later configs overriding earlier ones.
        Missing files are logged and skipped.
        """
        return cls.from_dict(cls._merge_yaml(paths))

    @classmethod
    def _merge_yaml(cls, paths: list[Path]) -> Dict:
        merged_dict = DEFAULT_CONFIG.to_dict()
        for path in paths:
            path = Path(path)
            if not path.is_file():
                logger.warning("Config path does not exist or is not a file: %s", path)
                continue
            try:
                with path.open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {path} must contain a mapping")
            merged_dict = deep_merge(merged_dict, data)
        return merged_dict

    @classmethod
    def from_dict(cls, data: Dict) -> "Config":
        try:
            return cls(
                system=SystemConfig(**data.get("system", {})),
                orchestrator=OrchestratorConfig(**data.get("orchestrator", {})),
                playback=PlaybackConfig(**data.get("playback", {})),
                notices=NoticeConfig(**data.get("notices", {})),
                history=HistoryConfig(**data.get("history", {})),
                storage=StorageConfig(**data.get("storage", {})),
                providers=ProvidersConfig.from_dict(data.get("providers", {})),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


DEFAULT_CONFIG = Config()
