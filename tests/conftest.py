"""Root-level pytest fixtures for the raincell test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus synthetic composite files. Tests use these fixtures
instead of creating raw dict configs.
"""

import logging
import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest

from raincell.radar.locator import radar_file_path
from raincell.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_netcdf import alps_grid, write_fake_radar_netcdf


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_binarizer_init(internal_config):
    ...     binarizer = RadarBinarizer(internal_config)
    ...     assert binarizer.quality_threshold == 10
    """
    return resolve_config(param_config, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_custom_threshold(make_config):
    ...     config = make_config(quality_threshold=20)
    ...     assert config.binarizer.quality_threshold == 20
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user)
        return resolve_config(param_config, None)

    return _make


# =============================================================================
# Directory and File Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def write_composite(temp_dir):
    """Factory writing a composite file at its archive path under temp_dir.

    A 4x5 grid centred in the Alps; ``acrr``/``quality`` default to a
    single 2x2 rain blob of 1 mm with quality 80. The file's ``time``
    defaults to ``when``.
    """
    def _write(when, acrr=None, quality=None, **kwargs):
        x, y = alps_grid(5, 4)
        if acrr is None:
            acrr = np.zeros((4, 5), dtype=int)
            acrr[1:3, 1:3] = 100
        if quality is None:
            quality = np.full((4, 5), 80)
        path = radar_file_path(temp_dir, when)
        kwargs.setdefault("time", when)
        return write_fake_radar_netcdf(path, acrr, quality, x, y, **kwargs)

    return _write


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers and level changed by the orchestrator."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
