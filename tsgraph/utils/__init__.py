"""
Utilities: configuration and logging.

Example:
    >>> from tsgraph.utils import load_config, setup_logging
    >>>
    >>> logger = setup_logging('tsgraph')
    >>> config = load_config("configs/spread.yaml")
"""

from .config import (
    NodeConfig,
    LinkConfig,
    GraphConfig,
    load_config,
    save_config,
)

from .logging import (
    setup_logging,
    ColoredFormatter,
)

__all__ = [
    # Config
    'NodeConfig',
    'LinkConfig',
    'GraphConfig',
    'load_config',
    'save_config',

    # Logging
    'setup_logging',
    'ColoredFormatter',
]
