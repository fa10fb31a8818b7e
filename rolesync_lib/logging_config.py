from __future__ import annotations
import logging
from pathlib import Path
import yaml
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s]: %(message)s'

NOISY_LOGGERS = ('discord', 'discord.http', 'discord.gateway', 'httpx', 'notion_client')


def configure_logging(config_path: Optional[Path] = None) -> logging.Logger:
    """Configure root logging for the application.

    Reads `log_level` from the YAML server config when it exists, then
    reconfigures the root logger to that level and format. Returns a
    module logger for the caller.
    """
    # Minimal early config so other imports can emit without error
    logging.basicConfig(level=logging.NOTSET, format='%(asctime)s INFO %(message)s')
    level = logging.INFO

    cfg_path = config_path or Path('data/config/server_config.yml')
    if cfg_path.exists():
        try:
            with cfg_path.open('r', encoding='utf-8') as _f:
                _cfg = yaml.safe_load(_f) or {}
            _lvl = _cfg.get('log_level') if isinstance(_cfg, dict) else None
            if isinstance(_lvl, str):
                _numeric = getattr(logging, _lvl.upper(), None)
                if isinstance(_numeric, int):
                    level = _numeric
        except (OSError, yaml.YAMLError):
            logging.exception('Failed to read server configuration for logging setup')

    logging.log(100, f'[rolesync]: Log level set to: {logging.getLevelName(level)}')

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logger.info("Starting role sync server")

    return logger
