"""
Tests for component registry.

Tests:
- Component registration
- Component retrieval
- Bare-name lookup across categories
- Error handling
- Metadata tracking
"""

import pytest

from tsgraph.core.registry import (
    ComponentRegistry,
    register_component,
    get_component,
    create_component
)
from tsgraph.transforms import ExpSmoother, TimeSeriesTransformation


# ============================================================================
# TEST FIXTURES
# ============================================================================


@pytest.fixture
def sample_component():
    """Create a sample node class."""

    class SampleNode(TimeSeriesTransformation):
        """Sample pass-through node."""

        def __init__(self, gain: float = 1.0):
            super().__init__()
            self.gain = gain

        def num_inputs(self):
            return 1

        def num_outputs(self):
            return 1

        def recompute(self):
            self.is_valid = False

    return SampleNode


# ============================================================================
# REGISTRATION TESTS
# ============================================================================


class TestRegistration:
    """Test component registration."""

    def test_builtins_registered(self):
        """Test that importing tsgraph registers the built-in nodes."""
        assert ComponentRegistry.has('source', 'series')
        assert ComponentRegistry.has('transform', 'exp_smoother')
        assert ComponentRegistry.has('transform', 'linear_combination')
        assert ComponentRegistry.has('model', 'ar')

    def test_register_component(self, sample_component):
        """Test registering a component."""
        register_component('transform', 'sample')(sample_component)

        assert ComponentRegistry.has('transform', 'sample')

    def test_register_via_decorator(self):
        """Test registration via decorator syntax."""

        @register_component('test', 'decorated')
        class DecoratedNode:
            pass

        assert ComponentRegistry.has('test', 'decorated')

    def test_register_duplicate_error(self, sample_component):
        """Test error when registering a different class under a taken name."""
        with pytest.raises(ValueError, match="already registered"):
            register_component('transform', 'exp_smoother')(sample_component)

    def test_reregister_same_class(self):
        """Test that re-registering the same class is a no-op."""
        register_component('transform', 'exp_smoother')(ExpSmoother)
        assert ComponentRegistry.get('transform', 'exp_smoother') is ExpSmoother

    def test_register_with_override(self, sample_component):
        """Test overriding an existing component."""
        register_component('transform', 'exp_smoother', override=True)(sample_component)

        assert ComponentRegistry.get('transform', 'exp_smoother') is sample_component

    def test_override_is_undone_between_tests(self):
        """Test that the registry fixture restored the built-in."""
        assert ComponentRegistry.get('transform', 'exp_smoother') is ExpSmoother


# ============================================================================
# RETRIEVAL TESTS
# ============================================================================


class TestRetrieval:
    """Test component lookup."""

    def test_get_component(self):
        assert get_component('transform', 'exp_smoother') is ExpSmoother

    def test_get_unknown_category(self):
        with pytest.raises(ValueError, match="Category 'nope' not found"):
            ComponentRegistry.get('nope', 'x')

    def test_get_unknown_name(self):
        with pytest.raises(ValueError, match="Available components"):
            ComponentRegistry.get('transform', 'nope')

    def test_find_bare_name(self):
        """Test lookup without a category."""
        assert ComponentRegistry.find('exp_smoother') is ExpSmoother

    def test_find_missing(self):
        with pytest.raises(ValueError, match="not found in registry"):
            ComponentRegistry.find('nope')

    def test_find_ambiguous(self, sample_component):
        """Test that a name in two categories needs a category."""
        register_component('model', 'exp_smoother')(sample_component)

        with pytest.raises(ValueError, match="ambiguous"):
            ComponentRegistry.find('exp_smoother')

    def test_create_component(self):
        """Test instantiation with config."""
        smoother = create_component('transform', 'exp_smoother', {'smooth_factor': 0.25})

        assert isinstance(smoother, ExpSmoother)
        assert smoother.smooth_factor == 0.25

    def test_create_component_defaults(self):
        smoother = create_component('transform', 'exp_smoother')
        assert smoother.smooth_factor == 0.9


# ============================================================================
# LISTING TESTS
# ============================================================================


class TestListing:
    """Test listings and metadata."""

    def test_list_categories(self):
        assert ComponentRegistry.list_categories() == ['model', 'source', 'transform']

    def test_list_components(self):
        assert ComponentRegistry.list_components('transform') == [
            'exp_smoother', 'linear_combination'
        ]
        assert ComponentRegistry.list_components('nope') == []

    def test_metadata(self):
        """Test metadata recorded at registration."""
        metadata = ComponentRegistry.list_components('model', include_metadata=True)

        assert metadata['ar']['class'] == 'ARModel'
        assert metadata['ar']['module'] == 'tsgraph.models.ar'
        assert 'AR(p)' in metadata['ar']['doc']

    def test_clear_category(self):
        """Test clearing one category."""
        ComponentRegistry.clear('model')

        assert ComponentRegistry.list_components('model') == []
        assert ComponentRegistry.has('transform', 'exp_smoother')

    def test_snapshot_and_restore(self, sample_component):
        """Test restoring an earlier state."""
        snapshot = ComponentRegistry.snapshot()
        register_component('extra', 'sample')(sample_component)
        ComponentRegistry.clear('transform')

        ComponentRegistry.restore(snapshot)

        assert 'extra' not in ComponentRegistry.list_categories()
        assert ComponentRegistry.has('transform', 'exp_smoother')
