"""Configuration loading for TreeFilter.

Configuration lives in a YAML file.  Only ``sources`` is required; every
other key falls back to ``DEFAULTS``.  The result is a plain ``dict`` so the
CLI can merge command-line options over it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from .metadata.scanner import CHECKSUM_ALGORITHMS

DEFAULT_CONFIG_PATH = Path('config/config.yml')

DEFAULTS: Dict[str, Any] = {
    'sources': [],
    'extensions': [],
    'prefixes': [],
    'patterns': [],
    'exclude_patterns': [],
    'min_size': None,
    'max_size': None,
    'include_hidden': True,
    'checksum_algo': None,
    'fail_fast': False,
}

_LIST_KEYS = ('sources', 'extensions', 'prefixes', 'patterns', 'exclude_patterns')
_SIZE_KEYS = ('min_size', 'max_size')
_BOOL_KEYS = ('include_hidden', 'fail_fast')


class ConfigError(ValueError):
    """The configuration file is unreadable or has invalid values."""


def validate_config(raw: Dict[str, Any], require_sources: bool = True) -> Dict[str, Any]:
    """Check types, fill defaults and return a new config dict."""
    unknown = set(raw) - set(DEFAULTS)
    if unknown:
        raise ConfigError(f'Unknown config keys: {", ".join(sorted(unknown))}')
    cfg = {**DEFAULTS, **raw}

    for key in _LIST_KEYS:
        value = cfg[key]
        if value is None:
            cfg[key] = []
        elif isinstance(value, str):
            cfg[key] = [value]
        elif not isinstance(value, list) or not all(isinstance(v, (str, int)) and not isinstance(v, bool) for v in value):
            raise ConfigError(f'{key} must be a list of strings')
        cfg[key] = [str(v) for v in cfg[key]]

    for key in _SIZE_KEYS:
        value = cfg[key]
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            raise ConfigError(f'{key} must be a non-negative integer')
    if cfg['min_size'] is not None and cfg['max_size'] is not None and cfg['min_size'] > cfg['max_size']:
        raise ConfigError('min_size is larger than max_size')

    for key in _BOOL_KEYS:
        if not isinstance(cfg[key], bool):
            raise ConfigError(f'{key} must be true or false')

    algo = cfg['checksum_algo']
    if algo is not None and str(algo).lower() not in CHECKSUM_ALGORITHMS:
        raise ConfigError(f'Unsupported checksum algorithm: {algo}')

    if require_sources and not cfg['sources']:
        raise ConfigError('At least one source directory is required')
    return cfg


def load_config(path: Path, require_sources: bool = True) -> Dict[str, Any]:
    """Read and validate the YAML configuration at ``path``."""
    try:
        with path.open('r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f'Cannot read config {path}: {exc}') from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {path}: {exc}') from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f'{path} must contain a mapping at the top level')
    return validate_config(raw, require_sources=require_sources)
