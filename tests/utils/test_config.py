"""
Tests for graph configuration.

Tests:
- Dataclass validation
- Dict conversion
- YAML save/load
- CSV path resolution
"""

import pytest
import yaml

from tsgraph.utils.config import (
    NodeConfig,
    LinkConfig,
    GraphConfig,
    load_config,
    save_config,
)


# ============================================================================
# TEST FIXTURES
# ============================================================================


@pytest.fixture
def config():
    return GraphConfig(
        name='spread',
        description='Smoothed spread between two prices',
        nodes=[
            NodeConfig(id='x', type='series', params={'csv': 'prices.csv', 'column': 'x'}),
            NodeConfig(id='y', type='series', params={'csv': 'prices.csv', 'column': 'y'}),
            NodeConfig(id='smooth', type='exp_smoother', params={'smooth_factor': 0.8}),
            NodeConfig(id='spread', type='linear_combination', placement=[10.0, 20.0]),
        ],
        links=[
            LinkConfig(source='x', target='smooth'),
            LinkConfig(source='smooth', target='spread'),
            LinkConfig(source='y', target='spread', target_socket=1),
        ],
    )


# ============================================================================
# VALIDATION TESTS
# ============================================================================


class TestValidation:
    """Test dataclass validation."""

    def test_node_needs_id(self):
        with pytest.raises(ValueError, match="non-empty"):
            NodeConfig(id='', type='series')

    def test_node_needs_type(self):
        with pytest.raises(ValueError, match="component type"):
            NodeConfig(id='a', type='')

    def test_none_params(self):
        assert NodeConfig(id='a', type='series', params=None).params == {}

    def test_negative_socket(self):
        with pytest.raises(ValueError, match="non-negative"):
            LinkConfig(source='a', target='b', source_socket=-1)

    def test_duplicate_node_id(self):
        with pytest.raises(ValueError, match="Duplicate node id 'a'"):
            GraphConfig(nodes=[NodeConfig('a', 'series'), NodeConfig('a', 'series')])

    def test_link_to_unknown_node(self):
        with pytest.raises(ValueError, match="unknown node 'b'"):
            GraphConfig(nodes=[NodeConfig('a', 'series')],
                        links=[LinkConfig(source='a', target='b')])

    def test_get_node(self, config):
        assert config.get_node('smooth').params == {'smooth_factor': 0.8}
        with pytest.raises(ValueError, match="not found"):
            config.get_node('nope')


# ============================================================================
# SERIALIZATION TESTS
# ============================================================================


class TestSerialization:
    """Test dict and YAML conversion."""

    def test_dict_round_trip(self, config):
        restored = GraphConfig.from_dict(config.to_dict())

        assert restored == config

    def test_from_dict_defaults(self):
        config = GraphConfig.from_dict({'nodes': [{'id': 'a', 'type': 'series'}]})

        assert config.name == 'graph'
        assert config.cascade_on_build is True
        assert config.links == []

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            GraphConfig.from_dict(['not', 'a', 'mapping'])

    def test_save_and_load(self, config, tmp_path):
        path = tmp_path / "configs" / "spread.yaml"

        save_config(config, str(path))
        loaded = load_config(str(path))

        assert [n.id for n in loaded.nodes] == ['x', 'y', 'smooth', 'spread']
        assert loaded.links[2].target_socket == 1
        assert loaded.get_node('spread').placement == [10.0, 20.0]

    def test_saved_yaml_keeps_order(self, config, tmp_path):
        path = tmp_path / "spread.yaml"
        save_config(config, str(path))

        data = yaml.safe_load(path.read_text())

        assert list(data.keys())[0] == 'name'
        assert data['nodes'][0]['id'] == 'x'

    def test_relative_csv_resolved(self, config, tmp_path):
        """Test that csv params are relative to the config file."""
        path = tmp_path / "configs" / "spread.yaml"
        save_config(config, str(path))

        loaded = load_config(str(path))

        assert loaded.get_node('x').params['csv'] == str(tmp_path / "configs" / "prices.csv")

    def test_absolute_csv_kept(self, tmp_path):
        csv = str(tmp_path / "prices.csv")
        path = tmp_path / "graph.yaml"
        path.write_text(yaml.dump({'nodes': [{'id': 'x', 'type': 'series',
                                              'params': {'csv': csv, 'column': 'x'}}]}))

        assert load_config(str(path)).get_node('x').params['csv'] == csv

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(str(path)).nodes == []
