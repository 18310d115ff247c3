"""Configuration for hosts embedding the engine.

The engine logs through loguru and is silent until a host enables it.
configure_logging() turns engine logging on and routes it to a sink.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Optional, Any

from loguru import logger


@dataclass(frozen=True)
class EngineConfig:
    """Engine settings.

    Attributes:
        seed: Seed for the random source; None for fresh entropy each match.
        log_level: Minimum level of engine log records to emit.
    """

    seed: Optional[int] = None
    log_level: str = "INFO"

    ENV_SEED = "VOVERI_SEED"
    ENV_LOG_LEVEL = "VOVERI_LOG_LEVEL"

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Load settings from VOVERI_SEED and VOVERI_LOG_LEVEL.

        Raises:
            ValueError: If VOVERI_SEED is set but not an integer.
        """
        raw_seed = os.getenv(cls.ENV_SEED)
        seed = int(raw_seed) if raw_seed not in (None, "") else None
        log_level = os.getenv(cls.ENV_LOG_LEVEL, "INFO").upper()
        return cls(seed=seed, log_level=log_level)


def configure_logging(config: EngineConfig, sink: Any = None) -> int:
    """Enable engine logging.

    Replaces every handler already registered with loguru, including its
    default DEBUG-level stderr handler, so records below the configured
    level go nowhere.

    Args:
        config: Supplies the minimum log level.
        sink: Any loguru sink; defaults to stderr.

    Returns:
        The loguru handler id, for logger.remove().
    """
    logger.remove()
    logger.enable("engine")
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=config.log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "{name}:{function} - <level>{message}</level>",
        filter="engine",
    )
