from __future__ import annotations
import logging
from pathlib import Path
import yaml
from typing import Optional

from locker_lib.config.config import DEFAULT_CONFIG_PATH


def configure_logging(config_path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for locker tools.

    The level comes from `level` when given, otherwise from the `log_level`
    entry of the locker YAML config, otherwise WARNING. Returns a module
    logger for the caller.
    """
    default_level = logging.WARNING

    lvl = level
    cfg_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if lvl is None and cfg_path.exists():
        try:
            with cfg_path.open('r', encoding='utf-8') as _f:
                _cfg = yaml.safe_load(_f) or {}
            if isinstance(_cfg, dict):
                section = _cfg.get('locker')
                lvl = _cfg.get('log_level') or (section.get('log_level') if isinstance(section, dict) else None)
        except (OSError, yaml.YAMLError):
            # If config parse fails, fall back to default level
            lvl = None
    if isinstance(lvl, str):
        numeric = getattr(logging, lvl.upper(), None)
        if isinstance(numeric, int):
            default_level = numeric

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=default_level, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)
    logger.debug('Log level set to: %s', logging.getLevelName(default_level))
    return logger
