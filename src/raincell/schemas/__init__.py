"""Pydantic configuration schemas for the raincell pipeline.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
load_user_config : function
    Resolve a Python user-config file
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
"""

from raincell.schemas.resolve import resolve_config
from raincell.schemas.internal import InternalConfig
from raincell.schemas.param import ParamConfig
from raincell.schemas.user import UserConfig
from raincell.schemas.initialization import load_user_config

__all__ = [
    'resolve_config',
    'load_user_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
]
