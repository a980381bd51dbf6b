"""
Run configuration.

Defaults can be overridden from a YAML file, then from FAKEFORGE_*
environment variables, then from CLI flags.
"""

import os
from dataclasses import dataclass, asdict, fields, replace
from typing import Optional

import yaml

from fakeforge.errors import ConfigError


OUTPUT_FORMATS = ("csv", "json")


@dataclass
class GenerationConfig:
    """Configuration for a generation run."""
    num_rows: int = 100
    output_format: Optional[str] = None  # csv, json; None = by schema source
    use_ai: bool = False
    ai_model: str = "gpt-3.5-turbo"
    ai_url: str = "https://api.openai.com/v1/chat/completions"
    ai_confidence_threshold: float = 0.7
    parallel: bool = False
    workers: int = 0  # 0 = logical CPU count
    batch_size: int = 1000
    cache_inference: bool = True
    seed: Optional[int] = None
    verbose: bool = False

    @property
    def worker_count(self) -> int:
        return self.workers if self.workers > 0 else (os.cpu_count() or 1)

    def validate(self) -> "GenerationConfig":
        if self.num_rows < 0:
            raise ConfigError(f"row count must be non-negative, got {self.num_rows}")
        if self.batch_size < 1:
            raise ConfigError(f"batch size must be at least 1, got {self.batch_size}")
        if self.workers < 0:
            raise ConfigError(f"worker count must be non-negative, got {self.workers}")
        if self.output_format is not None:
            fmt = self.output_format.lower()
            if fmt not in OUTPUT_FORMATS:
                raise ConfigError(f"unsupported output format '{self.output_format}' (use csv or json)")
            self.output_format = fmt
        return self

    def merge(self, **overrides) -> "GenerationConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_env(cls, base: "GenerationConfig" = None, environ: dict = None) -> "GenerationConfig":
        """Overlay FAKEFORGE_<FIELD> environment variables onto `base`."""
        environ = os.environ if environ is None else environ
        config = base or cls()
        overrides = {}
        for f in fields(cls):
            raw = environ.get(f"FAKEFORGE_{f.name.upper()}")
            if raw is None:
                continue
            overrides[f.name] = _coerce(f.name, raw, getattr(config, f.name))
        return replace(config, **overrides)


def _coerce(name: str, raw: str, current):
    try:
        if isinstance(current, bool):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        # seed defaults to None, so its type cannot be read off the value
        if isinstance(current, int) or name == "seed":
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except ValueError as e:
        raise ConfigError(f"invalid value for FAKEFORGE_{name.upper()}: {raw!r}") from e
    return raw


def load_config(path: str, base: GenerationConfig = None) -> GenerationConfig:
    """Load a YAML mapping of GenerationConfig fields."""
    if not os.path.exists(path):
        raise ConfigError(f"config file '{path}' does not exist")
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file '{path}' must contain a mapping")

    known = {f.name for f in fields(GenerationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    return replace(base or GenerationConfig(), **data)
