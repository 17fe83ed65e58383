"""Pipeline configuration, loaded from an optional YAML file."""

import dataclasses
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pickaxe.core.coordinator import DEFAULT_CONCURRENCY
from pickaxe.core.discovery import DEFAULT_IGNORE
from pickaxe.core.models import ConfigError
from pickaxe.core.template import DEFAULT_BLOCK_NAME, DEFAULT_CODE_IMPORT
from pickaxe.transforms.formatters import PRETTIER_COMMAND

DEFAULT_CONFIG_FILE = "pickaxe.yaml"


@dataclass
class PipelineConfig:
    """Settings for one run. CLI options override values from the file."""
    concurrency: int = DEFAULT_CONCURRENCY
    ignore: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    extensions: List[str] = field(default_factory=lambda: [".md"])
    permalink_root: Optional[str] = None
    block_name: str = DEFAULT_BLOCK_NAME
    code_import: str = DEFAULT_CODE_IMPORT
    formatter_command: List[str] = field(default_factory=lambda: list(PRETTIER_COMMAND))
    output_extension: str = ".jsx"
    warn_on_missing_link: bool = True
    annotate_frontmatter: bool = False
    title_case: bool = False
    frontmatter_keep: Optional[List[str]] = None
    frontmatter_remove: Optional[List[str]] = None
    frontmatter_add: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.concurrency, int) or self.concurrency < 1:
            raise ConfigError(f"concurrency must be a positive integer, got {self.concurrency!r}")
        for name in ('ignore', 'extensions', 'formatter_command'):
            value = getattr(self, name)
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"{name} must be a list of strings")
        for name in ('frontmatter_keep', 'frontmatter_remove'):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, list) or not all(isinstance(v, str) for v in value)):
                raise ConfigError(f"{name} must be a list of strings")
        if self.frontmatter_keep is not None and self.frontmatter_remove is not None:
            raise ConfigError("frontmatter_keep and frontmatter_remove are mutually exclusive")
        if not isinstance(self.frontmatter_add, dict):
            raise ConfigError("frontmatter_add must be a mapping")
        if not self.formatter_command:
            raise ConfigError("formatter_command must not be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def merged(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


def load_config(path: Optional[Path] = None) -> PipelineConfig:
    """Load configuration.

    Resolution order: the explicit path, then ./pickaxe.yaml, then defaults.

    Raises:
        ConfigError: if the file is unreadable, not valid YAML, or has bad values
    """
    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.exists():
            return PipelineConfig()
    else:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if raw is None:
        return PipelineConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid config in {path}: expected a mapping")
    return PipelineConfig.from_dict(_expand_env_vars(raw))


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj
