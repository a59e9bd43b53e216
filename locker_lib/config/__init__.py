from .config import LockerConfig, load_config, dump_config, DEFAULT_CONFIG_PATH

__all__ = ["LockerConfig", "load_config", "dump_config", "DEFAULT_CONFIG_PATH"]
