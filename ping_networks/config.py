"""
Probe configuration and config file loading
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeConfig:
    """Probe settings, immutable for the duration of a scan"""

    # Parallelism
    concurrency_limit: int = 50

    # Ping parameters
    pings_per_attempt: int = 1
    packet_size_bytes: int = 32
    time_to_live: int = 128
    per_ping_timeout_seconds: float = 1.0

    # Retries
    max_retries: int = 0
    backoff_base_seconds: float = 1.0

    # Extras
    resolve_hostnames: bool = True
    max_hosts: Optional[int] = None

    def __post_init__(self):
        """Validate values after initialization"""
        self._validate_values()

    def _validate_values(self):
        if self.concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")
        if self.pings_per_attempt < 1:
            raise ValueError("pings_per_attempt must be at least 1")
        if not 1 <= self.packet_size_bytes <= 65500:
            raise ValueError("packet_size_bytes must be between 1 and 65500")
        if not 1 <= self.time_to_live <= 255:
            raise ValueError("time_to_live must be between 1 and 255")
        if self.per_ping_timeout_seconds < 0:
            raise ValueError("per_ping_timeout_seconds must not be negative")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.backoff_base_seconds < 0:
            raise ValueError("backoff_base_seconds must not be negative")
        if self.max_hosts is not None and self.max_hosts < 1:
            raise ValueError("max_hosts must be at least 1 when set")

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after the given (zero-based) attempt"""
        return self.backoff_base_seconds * (2 ** attempt)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProbeConfig":
        """
        Create from dictionary

        camelCase aliases used by the web front end are accepted;
        unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        values = {}

        for key, value in data.items():
            name = ConfigLoader.ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                logger.warning(f"Unknown config option ignored: {key}")

        return cls(**values)


class ConfigLoader:
    """Loads ProbeConfig from YAML or JSON files"""

    CONFIG_FILES = [
        "ping_networks.yaml",
        "config/ping_networks.yaml",
        "ping_networks.json",
    ]

    DEFAULT_CONFIG = {
        "concurrency_limit": 50,
        "pings_per_attempt": 1,
        "packet_size_bytes": 32,
        "time_to_live": 128,
        "per_ping_timeout_seconds": 1.0,
        "max_retries": 0,
        "backoff_base_seconds": 1.0,
        "resolve_hostnames": True,
        "max_hosts": None,
    }

    ALIASES = {
        "concurrencyLimit": "concurrency_limit",
        "throttle": "concurrency_limit",
        "pingsPerAttempt": "pings_per_attempt",
        "count": "pings_per_attempt",
        "packetSize": "packet_size_bytes",
        "bufferSize": "packet_size_bytes",
        "ttl": "time_to_live",
        "timeToLive": "time_to_live",
        "timeout": "per_ping_timeout_seconds",
        "maxRetries": "max_retries",
        "retries": "max_retries",
        "resolveHostnames": "resolve_hostnames",
        "maxPings": "max_hosts",
        "maxHosts": "max_hosts",
    }

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> ProbeConfig:
        """
        Load configuration

        Args:
            config_path: Path to a YAML/JSON config file (optional)

        Returns:
            Probe configuration merged over the defaults
        """
        config_dict = cls.DEFAULT_CONFIG.copy()

        found_config = cls._find_config_file(config_path)
        if found_config:
            config_dict.update(cls._load_config_file(found_config))
            logger.info(f"Loaded configuration from {found_config}")
        elif config_path:
            logger.warning(f"Config file not found: {config_path}, using defaults")
        else:
            logger.info("No config file found, using defaults")

        return ProbeConfig.from_dict(config_dict)

    @classmethod
    def _find_config_file(cls, config_path: Optional[str] = None) -> Optional[Path]:
        if config_path:
            path = Path(config_path)
            return path if path.exists() else None

        for config_file in cls.CONFIG_FILES:
            path = Path(config_file)
            if path.exists():
                return path

        return None

    @staticmethod
    def _load_config_file(filepath: Path) -> Dict[str, Any]:
        """Read a config file; a top-level 'probe' section is used when present"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                if filepath.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Malformed config file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {filepath} must contain a mapping")

        if isinstance(data.get('probe'), dict):
            data = data['probe']

        return data

    @staticmethod
    def save(config: ProbeConfig, filepath: str) -> Path:
        """Write configuration as YAML, or JSON for a .json path"""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            if path.suffix.lower() == '.json':
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
            else:
                yaml.safe_dump({'probe': config.to_dict()}, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {path}")
        return path
