from pydantic import BaseModel, field_validator
from pathlib import Path
from typing import Optional, Union
import logging
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path('data/config/locker.yml')


class LockerConfig(BaseModel):
    """Defaults read by every locker built from a provider."""
    driver: str = 'local'
    namespace: str = 'locker'
    separator: str = '.'
    events_enabled: bool = True
    data_dir: str = './data/locker'
    quota_bytes: Optional[int] = None
    log_level: Optional[str] = None

    @field_validator('separator')
    @classmethod
    def _separator_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError('separator must not be empty')
        return v

    @field_validator('quota_bytes')
    @classmethod
    def _quota_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError('quota_bytes must be positive')
        return v


def load_config(path: Optional[Union[str, Path]] = None) -> LockerConfig:
    """Read a LockerConfig from YAML. A missing file yields the defaults."""
    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        logger.debug('No locker config at %s, using defaults', cfg_path)
        return LockerConfig()
    with cfg_path.open('r', encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f'{cfg_path} must contain a mapping, got {type(raw).__name__}')
    # Allow the settings to live under a top-level `locker:` section.
    section = raw.get('locker', raw)
    cfg = LockerConfig(**section)
    logger.debug('Loaded locker config from %s', cfg_path)
    return cfg


def dump_config(config: LockerConfig) -> str:
    return yaml.safe_dump(config.model_dump(), sort_keys=False)
