"""
Config system - Layered configuration for the model layer.

``ConfigLoader`` merges configuration from several sources and
``ModelConfig`` is the typed view the registry reads at registration and
validation time.

Sources, lowest precedence first:
    1. config files (JSON or YAML, glob patterns supported)
    2. a ``.env`` file
    3. environment variables (``MODELKIT_MODELS__USE_UTC=false``)
    4. explicit overrides
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass, fields, asdict
from glob import glob
from pathlib import Path
import os
import json

from .faults import ConfigInvalidFault

_TRUE_WORDS = frozenset({"true", "yes", "1"})
_FALSE_WORDS = frozenset({"false", "no", "0"})


def _deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    """Merge ``source`` into ``target``; nested dicts merge, anything else replaces."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            target[key] = value


def _coerce(text: str) -> Any:
    """Turn an environment string into a bool, number, JSON value or str."""
    lowered = text.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    try:
        return float(text) if "." in text else int(text)
    except ValueError:
        pass
    if text[:1] in ("{", "["):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
    return text


def _read_config_file(path: Path) -> Dict[str, Any]:
    if path.suffix == ".json":
        return json.loads(path.read_text())
    if path.suffix in (".yaml", ".yml"):
        import yaml
        return yaml.safe_load(path.read_text()) or {}
    return {}


def _read_env_file(path: str) -> Iterator[Tuple[str, str]]:
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw in env_path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        yield key.strip(), value.strip().strip("\"'")


class ConfigLoader:
    """Accumulates configuration from files, ``.env``, environment and overrides."""

    def __init__(self, env_prefix: str = "MODELKIT_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[List[str]] = None,
        env_prefix: str = "MODELKIT_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Build a loader from every source; later sources win.

        Args:
            paths: Config file paths or glob patterns
            env_prefix: Prefix selecting environment variables
            env_file: Optional ``.env`` file
            overrides: Values applied last
        """
        loader = cls(env_prefix=env_prefix)
        for pattern in paths or []:
            for match in sorted(glob(pattern)):
                loader.merge(_read_config_file(Path(match)))
        if env_file:
            loader.merge_env(_read_env_file(env_file))
        loader.merge_env(os.environ.items())
        if overrides:
            loader.merge(overrides)
        return loader

    def merge(self, data: Dict[str, Any]) -> None:
        _deep_merge(self.config_data, data)

    def merge_env(self, items: Iterable[Tuple[str, str]]) -> None:
        """Merge prefixed ``KEY=value`` pairs; ``__`` separates nesting levels."""
        for key, value in items:
            if not key.startswith(self.env_prefix):
                continue
            *parents, leaf = key[len(self.env_prefix):].lower().split("__")
            nested: Dict[str, Any] = {leaf: _coerce(value)}
            for part in reversed(parents):
                nested = {part: nested}
            self.merge(nested)

    def get(self, path: str, default: Any = None) -> Any:
        """Value at a dotted path such as ``"models.use_utc"``."""
        node: Any = self.config_data
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node


@dataclass
class ModelConfig:
    """
    Process-wide flags for the model layer.

    Attributes:
        use_timestamps: Auto-declare and stamp ``createdAt``/``updatedAt``
        use_utc: Timestamps and parsed datetimes are aware UTC values
        force_camel: Rewrite snake_case parameter keys to camelCase
        default_locale: Locale for validation messages when none is given
    """

    use_timestamps: bool = True
    use_utc: bool = True
    force_camel: bool = True
    default_locale: str = "en-us"

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "ModelConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        data = data or {}
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                raise ConfigInvalidFault(key, "unknown model setting")
            expected = bool if key != "default_locale" else str
            if not isinstance(value, expected):
                raise ConfigInvalidFault(
                    key, f"expected {expected.__name__}, got {type(value).__name__}"
                )
            values[key] = value

        return cls(**values)

    @classmethod
    def from_loader(cls, loader: ConfigLoader, section: str = "models") -> "ModelConfig":
        """Read the ``models`` section of a loaded configuration."""
        return cls.from_mapping(loader.get(section, {}))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
