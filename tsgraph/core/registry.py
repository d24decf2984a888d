"""
Global component registry with zero magic.

Node classes register themselves via decorator under a category
('source', 'transform', 'model') and a name. Lookup is explicit; the
builder uses it to turn YAML graph descriptions into live nodes.
"""

from typing import Dict, Type, Optional, List, Callable, Any, Union
import inspect
import logging

from .interface import Connectable


logger = logging.getLogger(__name__)

ComponentCategory = str
ComponentName = str


class ComponentRegistry:
    """
    Global registry for node classes.

    Design principles:
    - Explicit registration (decorator)
    - Fast lookup (O(1) dict access)
    - Clear errors listing what is available

    Example:
        >>> from tsgraph.core import ComponentRegistry, register_component
        >>>
        >>> @register_component('transform', 'my_filter')
        >>> class MyFilter(TimeSeriesTransformation):
        ...     pass
        >>>
        >>> filter_cls = ComponentRegistry.get('transform', 'my_filter')
        >>> node = filter_cls(window=5)
    """

    # Category -> Name -> Class
    _registry: Dict[ComponentCategory, Dict[ComponentName, Type]] = {
        'source': {},
        'transform': {},
        'model': {},
    }

    # Registration metadata for listings
    _metadata: Dict[ComponentCategory, Dict[ComponentName, Dict]] = {
        cat: {} for cat in _registry.keys()
    }

    @classmethod
    def register(
        cls,
        category: ComponentCategory,
        name: ComponentName,
        override: bool = False
    ) -> Callable:
        """
        Register a node class.

        Args:
            category: Component category ('transform', 'model', ...)
            name: Unique name within category
            override: Allow replacing an existing registration

        Returns:
            Decorator function

        Raises:
            ValueError: If name already registered and override=False
        """
        def decorator(component_cls: Type) -> Type:
            if category not in cls._registry:
                cls._registry[category] = {}
                cls._metadata[category] = {}

            if name in cls._registry[category] and not override:
                existing = cls._registry[category][name]
                if existing is component_cls:
                    return component_cls
                raise ValueError(
                    f"Component '{name}' already registered in category '{category}'. "
                    f"Existing: {existing.__module__}.{existing.__name__}. "
                    f"Use override=True to replace."
                )

            cls._registry[category][name] = component_cls
            cls._metadata[category][name] = {
                'module': component_cls.__module__,
                'class': component_cls.__name__,
                'doc': inspect.getdoc(component_cls),
            }
            logger.debug("Registered %s/%s -> %s", category, name, component_cls.__name__)
            return component_cls

        return decorator

    @classmethod
    def get(cls, category: ComponentCategory, name: ComponentName) -> Type:
        """
        Get a registered class.

        Raises:
            ValueError: If category or name not found
        """
        if category not in cls._registry:
            available = list(cls._registry.keys())
            raise ValueError(
                f"Category '{category}' not found. "
                f"Available categories: {available}"
            )

        if name not in cls._registry[category]:
            available = sorted(cls._registry[category].keys())
            raise ValueError(
                f"Component '{name}' not found in category '{category}'. "
                f"Available components: {available}"
            )

        return cls._registry[category][name]

    @classmethod
    def find(cls, name: ComponentName) -> Type:
        """
        Get a class by name alone, searching every category.

        Raises:
            ValueError: If no category has the name, or more than one does
        """
        matches = [cat for cat in cls._registry if name in cls._registry[cat]]
        if not matches:
            available = [
                f"{cat}/{n}" for cat in sorted(cls._registry)
                for n in sorted(cls._registry[cat])
            ]
            raise ValueError(
                f"Component type '{name}' not found in registry. "
                f"Available components: {available}"
            )
        if len(matches) > 1:
            raise ValueError(
                f"Component type '{name}' is ambiguous; registered in {sorted(matches)}. "
                f"Use 'category/name'."
            )
        return cls._registry[matches[0]][name]

    @classmethod
    def has(cls, category: ComponentCategory, name: ComponentName) -> bool:
        """Check if component is registered."""
        return (
            category in cls._registry and
            name in cls._registry[category]
        )

    @classmethod
    def list_categories(cls) -> List[ComponentCategory]:
        """List all categories."""
        return sorted(cls._registry.keys())

    @classmethod
    def list_components(
        cls,
        category: ComponentCategory,
        include_metadata: bool = False
    ) -> Union[List[ComponentName], Dict[ComponentName, Dict]]:
        """
        List all components in a category.

        Args:
            category: Category to list
            include_metadata: If True, return dict with module/class/doc
        """
        if category not in cls._registry:
            return [] if not include_metadata else {}

        if include_metadata:
            return cls._metadata[category].copy()
        return sorted(cls._registry[category].keys())

    @classmethod
    def clear(cls, category: Optional[ComponentCategory] = None):
        """
        Clear registry (mainly for testing).

        Args:
            category: If provided, clear only this category.
        """
        if category:
            if category in cls._registry:
                cls._registry[category].clear()
                cls._metadata[category].clear()
        else:
            for cat in cls._registry:
                cls._registry[cat].clear()
                cls._metadata[cat].clear()

    @classmethod
    def snapshot(cls) -> Dict[ComponentCategory, Dict[ComponentName, Type]]:
        """Copy of the current registrations, for restore()."""
        return {cat: dict(entries) for cat, entries in cls._registry.items()}

    @classmethod
    def restore(cls, snapshot: Dict[ComponentCategory, Dict[ComponentName, Type]]):
        """Reset the registry to a snapshot taken earlier."""
        cls._registry.clear()
        cls._metadata.clear()
        for category, entries in snapshot.items():
            cls._registry[category] = {}
            cls._metadata[category] = {}
            for name, component_cls in entries.items():
                cls.register(category, name, override=True)(component_cls)


def register_component(
    category: ComponentCategory,
    name: ComponentName,
    override: bool = False
) -> Callable:
    """
    Register a node class (convenience wrapper).

    Example:
        >>> @register_component('transform', 'exp_smoother')
        >>> class ExpSmoother(TimeSeriesTransformation):
        ...     ...
    """
    return ComponentRegistry.register(category, name, override)


def get_component(category: ComponentCategory, name: ComponentName) -> Type:
    """Get a registered class (convenience wrapper)."""
    return ComponentRegistry.get(category, name)


def create_component(
    category: ComponentCategory,
    name: ComponentName,
    config: Optional[Dict[str, Any]] = None
) -> Connectable:
    """
    Create a node instance from config.

    Args:
        category: Component category
        name: Component name
        config: Keyword arguments for the constructor

    Returns:
        Instantiated node

    Example:
        >>> smoother = create_component('transform', 'exp_smoother',
        ...                             {'smooth_factor': 0.5})
    """
    component_cls = ComponentRegistry.get(category, name)
    return component_cls(**(config or {}))
