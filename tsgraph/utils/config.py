"""
Configuration management for tsgraph.

This module provides configuration classes and utilities:
- NodeConfig: one node (registered component + constructor params)
- LinkConfig: one socket-to-socket link
- GraphConfig: a complete graph description
- YAML loading/saving utilities

Example:
    >>> from tsgraph.utils import load_config
    >>>
    >>> config = load_config('configs/spread.yaml')
    >>> [n.id for n in config.nodes]
    ['x', 'y', 'smooth', 'spread']

YAML layout:

    name: spread
    nodes:
      - id: x
        type: series
        params: {csv: data/prices.csv, column: x}
      - id: smooth
        type: exp_smoother
        params: {smooth_factor: 0.8}
    links:
      - {source: x, target: smooth}
      - {source: smooth, source_socket: 0, target: spread, target_socket: 0}
"""

import yaml
from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, List
from pathlib import Path


# ============================================================================
# NODE CONFIGURATION
# ============================================================================

@dataclass
class NodeConfig:
    """
    One node of a graph.

    Args:
        id: Unique node name within the graph
        type: Registered component name, optionally 'category/name'
        params: Constructor keyword arguments
        placement: Opaque host metadata (e.g. canvas coordinates)
    """

    id: str
    type: str
    params: Dict[str, Any] = field(default_factory=dict)
    placement: Optional[List[float]] = None

    def __post_init__(self):
        """Validate configuration."""
        if not self.id:
            raise ValueError("Node id must be a non-empty string")
        if not self.type:
            raise ValueError(f"Node '{self.id}' needs a component type")
        if self.params is None:
            self.params = {}


# ============================================================================
# LINK CONFIGURATION
# ============================================================================

@dataclass
class LinkConfig:
    """
    One directed link.

    Args:
        source: Source node id
        target: Destination node id
        source_socket: Output socket on the source (default: 0)
        target_socket: Input socket on the destination (default: 0)
    """

    source: str
    target: str
    source_socket: int = 0
    target_socket: int = 0

    def __post_init__(self):
        """Validate configuration."""
        if self.source_socket < 0 or self.target_socket < 0:
            raise ValueError(
                f"Link {self.source}->{self.target}: sockets must be non-negative"
            )


# ============================================================================
# GRAPH CONFIGURATION
# ============================================================================

@dataclass
class GraphConfig:
    """
    Complete graph description.

    Args:
        nodes: Nodes in insertion order (defines indices)
        links: Links in insertion order (defines cascade order)
        name: Graph name
        description: Free text
        cascade_on_build: Cascade from every source node after building
    """

    nodes: List[NodeConfig] = field(default_factory=list)
    links: List[LinkConfig] = field(default_factory=list)
    name: str = "graph"
    description: str = ""
    cascade_on_build: bool = True

    def __post_init__(self):
        """Validate configuration."""
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate node id '{node.id}'")
            seen.add(node.id)
        for link in self.links:
            for end in (link.source, link.target):
                if end not in seen:
                    raise ValueError(
                        f"Link {link.source}->{link.target} references unknown node '{end}'. "
                        f"Known nodes: {sorted(seen)}"
                    )

    def get_node(self, node_id: str) -> NodeConfig:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise ValueError(f"Node '{node_id}' not found")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'cascade_on_build': self.cascade_on_build,
            'nodes': [asdict(n) for n in self.nodes],
            'links': [asdict(l) for l in self.links],
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'GraphConfig':
        """Create from dictionary."""
        if not isinstance(config_dict, dict):
            raise ValueError(f"Graph config must be a mapping, got {type(config_dict).__name__}")
        return cls(
            nodes=[NodeConfig(**n) for n in config_dict.get('nodes', [])],
            links=[LinkConfig(**l) for l in config_dict.get('links', [])],
            name=config_dict.get('name', 'graph'),
            description=config_dict.get('description', ''),
            cascade_on_build=config_dict.get('cascade_on_build', True),
        )


# ============================================================================
# YAML UTILITIES
# ============================================================================

def load_config(config_path: str) -> GraphConfig:
    """
    Load configuration from YAML file.

    Relative 'csv' paths in node params are resolved against the config
    file's directory.

    Args:
        config_path: Path to YAML config file

    Returns:
        GraphConfig instance
    """
    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    config = GraphConfig.from_dict(config_dict or {})

    base = Path(config_path).parent
    for node in config.nodes:
        csv = node.params.get('csv')
        if csv is not None and not Path(csv).is_absolute():
            node.params['csv'] = str(base / csv)

    return config


def save_config(config: GraphConfig, config_path: str):
    """
    Save configuration to YAML file.

    Args:
        config: GraphConfig instance
        config_path: Path to save YAML file
    """
    Path(config_path).parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
