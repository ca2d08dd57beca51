import logging
import logging.handlers
import os
import sys
from typing import Optional

import yaml
from pydantic import ValidationError

from vectormotion.config.schemas import EngineConfig

BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# ---------------- Logging ----------------


def get_logger(name="vectormotion", log_file=None):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    fmt = logging.Formatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","step":"%(name)s","msg":"%(message)s"}'
    )
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    logger.addHandler(sh)
    if log_file:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=5)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger


log = get_logger("vectormotion")

# ---------------- Config ----------------


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must be a mapping/object.")
    return data


def load_config(path: Optional[str] = None) -> EngineConfig:
    """Load the engine configuration.

    Resolution order: explicit ``path``, ``conf/engine.yaml``,
    ``conf/engine.example.yaml``, built-in defaults.
    """
    if path is None:
        path = os.path.join(BASE, "conf", "engine.yaml")
        if not os.path.exists(path):
            path = os.path.join(BASE, "conf", "engine.example.yaml")
    if not os.path.exists(path):
        log.info(f"No engine config at {path}; using defaults")
        return EngineConfig()

    raw = load_yaml(path)
    try:
        cfg = EngineConfig(**raw)
    except ValidationError as e:
        log.error(f"Config validation failed: {e}")
        raise
    level = logging.getLevelName(cfg.log_level.upper())
    if isinstance(level, int):
        logging.getLogger("vectormotion").setLevel(level)
    return cfg
