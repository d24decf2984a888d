"""
tsgraph: composable time-series models wired as a dataflow graph.
"""

__version__ = "0.1.0"

# ============================================================================
# CORE IMPORTS
# ============================================================================

from .core import (
    Connectable,
    Link,
    NodeRecord,
    DirectedGraph,
    InvalidSocketError,
    InvalidGeometryError,
    CycleDetectedError,
    ComponentRegistry,
    register_component,
    GraphBuilder,
    build_graph,
)

from .data import TimeSeries, MVTimeSeries, Longitudinal, read_csv_series

# Registers built-in components
from .transforms import (
    SeriesSource,
    ExpSmoother,
    LinearCombinationTransform,
)
from .models import ARModel

from .utils import load_config, save_config, setup_logging

# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # Core
    'Connectable',
    'Link',
    'NodeRecord',
    'DirectedGraph',
    'InvalidSocketError',
    'InvalidGeometryError',
    'CycleDetectedError',
    'ComponentRegistry',
    'register_component',
    'GraphBuilder',
    'build_graph',

    # Data
    'TimeSeries',
    'MVTimeSeries',
    'Longitudinal',
    'read_csv_series',

    # Nodes
    'SeriesSource',
    'ExpSmoother',
    'LinearCombinationTransform',
    'ARModel',

    # Utils
    'load_config',
    'save_config',
    'setup_logging',
]
