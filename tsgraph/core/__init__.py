"""
Core graph engine: node contract, directed graph, registry and builder.
"""

from .interface import (
    Connectable,
    SocketSpec,
    InvalidSocketError,
    InvalidGeometryError,
    CycleDetectedError,
    check_socket,
    describe_sockets,
    is_compatible,
)
from .graph import Link, NodeRecord, DirectedGraph, NodeId
from .registry import (
    ComponentRegistry,
    register_component,
    get_component,
    create_component,
)
from .builder import GraphBuilder, BuiltGraph, build_graph

__all__ = [
    # Interface
    'Connectable',
    'SocketSpec',
    'InvalidSocketError',
    'InvalidGeometryError',
    'CycleDetectedError',
    'check_socket',
    'describe_sockets',
    'is_compatible',

    # Graph
    'Link',
    'NodeRecord',
    'DirectedGraph',
    'NodeId',

    # Registry
    'ComponentRegistry',
    'register_component',
    'get_component',
    'create_component',

    # Builder
    'GraphBuilder',
    'BuiltGraph',
    'build_graph',
]
