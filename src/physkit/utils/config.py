"""
YAML configuration for the transform engine.

Expected layout (every key optional)::

    transform:
      backend: numba
      cache_twiddles: true
      max_cached_tables: 8
      dtype: complex128
    logging:
      level: WARNING
      file: null
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

import yaml


@dataclass
class TransformConfig:
    """Engine and logging settings."""
    backend: str = 'numba'
    cache_twiddles: bool = True
    max_cached_tables: int = 8
    dtype: str = 'complex128'
    # Logging
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.backend not in ('numba', 'numpy'):
            raise ValueError(f"backend must be 'numba' or 'numpy', got {self.backend!r}")
        if self.dtype not in ('complex128', 'clongdouble'):
            raise ValueError(f"dtype must be 'complex128' or 'clongdouble', got {self.dtype!r}")
        if int(self.max_cached_tables) < 1:
            raise ValueError(f"max_cached_tables must be >= 1, got {self.max_cached_tables}")
        self.max_cached_tables = int(self.max_cached_tables)
        self.cache_twiddles = bool(self.cache_twiddles)

    @classmethod
    def from_dict(cls, config: dict) -> 'TransformConfig':
        """Build from the nested ``transform`` / ``logging`` mapping."""
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"Config root must be a mapping, got {type(config).__name__}")

        unknown = set(config) - {'transform', 'logging'}
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        transform_cfg = config.get('transform') or {}
        logging_cfg = config.get('logging') or {}

        known = {f.name for f in fields(cls)} - {'log_level', 'log_file'}
        unknown = set(transform_cfg) - known
        if unknown:
            raise ValueError(f"Unknown transform options: {sorted(unknown)}")
        unknown = set(logging_cfg) - {'level', 'file'}
        if unknown:
            raise ValueError(f"Unknown logging options: {sorted(unknown)}")

        kwargs = dict(transform_cfg)
        if 'level' in logging_cfg:
            kwargs['log_level'] = str(logging_cfg['level'])
        if 'file' in logging_cfg:
            kwargs['log_file'] = logging_cfg['file']
        return cls(**kwargs)

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            'transform': {k: d[k] for k in ('backend', 'cache_twiddles', 'max_cached_tables', 'dtype')},
            'logging': {'level': d['log_level'], 'file': d['log_file']},
        }


def load_config(config_path: Union[str, Path, None] = None) -> TransformConfig:
    """Load a TransformConfig from YAML; no path means defaults."""
    if config_path is None:
        return TransformConfig()
    with open(config_path, 'r') as f:
        return TransformConfig.from_dict(yaml.safe_load(f))
