"""Load a user configuration file and resolve it.

User configuration files are plain Python modules defining a ``CONFIG``
dict (see ``scripts/user_config.py``).
"""

import importlib.util
import logging
from pathlib import Path

from raincell.schemas.internal import InternalConfig
from raincell.schemas.param import ParamConfig
from raincell.schemas.resolve import resolve_config

logger = logging.getLogger(__name__)


def load_user_config_dict(config_path) -> dict:
    """Load the CONFIG dict from a Python file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("raincell_user_config", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load config module from {path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    config = getattr(module, "CONFIG", None)
    if not isinstance(config, dict):
        raise ValueError(f"No CONFIG dict found in {path}")
    return config


def load_user_config(config_path) -> InternalConfig:
    """Resolve a user config file over the expert defaults.

    Examples
    --------
    >>> config = load_user_config("scripts/user_config.py")
    >>> orchestrator = PipelineOrchestrator(config)
    """
    config = resolve_config(ParamConfig(), load_user_config_dict(config_path))
    logger.debug("Loaded user config from %s", config_path)
    return config


__all__ = ['load_user_config', 'load_user_config_dict']
