"""
Core interfaces for tsgraph nodes.

Every participant in a DirectedGraph implements the Connectable protocol:
numbered input/output sockets, a declaration of the value kinds each socket
accepts or produces, socket getters/setters and an explicit recompute step
guarded by a validity flag.

Key Design Principles:
- Protocol-based (duck typing) rather than inheritance-based
- Value kinds are plain Python classes (TimeSeries, MVTimeSeries, ...)
- Nodes own their computed state; the graph never reaches into it
- Socket misuse is a programmer error and raises InvalidSocketError

Example:
    >>> class Doubler:
    ...     def num_inputs(self): return 1
    ...     def num_outputs(self): return 1
    ...     # ... implement the rest of the Connectable protocol
    >>>
    >>> isinstance(Doubler(), Connectable)
"""

from typing import Protocol, Any, Optional, FrozenSet, List, runtime_checkable
from dataclasses import dataclass, field


# ============================================================================
# EXCEPTIONS
# ============================================================================


class InvalidSocketError(IndexError):
    """
    Socket index outside a node's declared input/output range.

    Raised by node implementations, never by the graph. Signals that the
    graph was wired against a stale contract and should not be retried.
    """

    def __init__(self, socket: int, count: int, direction: str = 'input'):
        self.socket = socket
        self.count = count
        self.direction = direction
        super().__init__(
            f"Invalid {direction} socket {socket}: node declares {count} "
            f"{direction}{'s' if count != 1 else ''}"
        )


class InvalidGeometryError(ValueError):
    """Malformed size arguments passed to a numeric helper."""


class CycleDetectedError(RuntimeError):
    """
    A cascade or ordering pass found a directed cycle.

    Attributes:
        cycle: Node indices forming the cycle (first index repeated at end)
    """

    def __init__(self, cycle: List[int]):
        self.cycle = list(cycle)
        path = ' -> '.join(str(i) for i in self.cycle)
        super().__init__(f"Graph has a directed cycle: {path}")


# ============================================================================
# PROTOCOLS
# ============================================================================


@runtime_checkable
class Connectable(Protocol):
    """
    Capability contract for every graph computation node.

    Required methods:
    - num_inputs / num_outputs: socket counts
    - get_input_name / get_output_name: human-readable socket names
    - get_allowed_input_types_for / get_output_types_for: value kinds
    - set_input / get_output: socket values
    - recompute: rebuild internal state from current inputs

    Required attribute:
    - is_valid: whether the outputs reflect the current inputs

    set_input is expected to perform whatever local recompute the node
    needs; the cascade never calls recompute() separately.

    Example:
        >>> smoother = ExpSmoother(smooth_factor=0.5)
        >>> smoother.set_input(0, series)
        >>> assert smoother.is_valid
        >>> smoothed = smoother.get_output(0)
    """

    is_valid: bool

    def num_inputs(self) -> int:
        """Number of input sockets."""
        ...

    def num_outputs(self) -> int:
        """Number of output sockets."""
        ...

    def get_input_name(self, index: int) -> str:
        """Name of input socket ``index``."""
        ...

    def get_output_name(self, index: int) -> str:
        """Name of output socket ``index``."""
        ...

    def get_allowed_input_types_for(self, socket: int) -> FrozenSet[type]:
        """
        Value kinds accepted on an input socket.

        Raises:
            InvalidSocketError: If socket is out of range
        """
        ...

    def get_output_types_for(self, socket: int) -> FrozenSet[type]:
        """
        Value kinds produced on an output socket.

        Raises:
            InvalidSocketError: If socket is out of range
        """
        ...

    def set_input(self, socket: int, value: Any, source: Optional[Any] = None) -> None:
        """
        Feed a value into an input socket.

        Args:
            socket: Input socket index
            value: New value (None disconnects the socket)
            source: Opaque metadata describing where the value came from

        Raises:
            InvalidSocketError: If socket is out of range
        """
        ...

    def get_output(self, socket: int) -> Any:
        """
        Current value of an output socket, or None while invalid.

        Raises:
            InvalidSocketError: If socket is out of range
        """
        ...

    def recompute(self) -> None:
        """Recompute outputs from current inputs and update is_valid."""
        ...


# ============================================================================
# DATACLASSES
# ============================================================================


@dataclass(frozen=True)
class SocketSpec:
    """
    Description of one socket of a Connectable.

    Attributes:
        index: Socket number
        name: Human-readable socket name
        types: Value kinds accepted (input) or produced (output)
        direction: 'input' or 'output'

    Example:
        >>> specs = describe_sockets(ExpSmoother())
        >>> specs[0]
        SocketSpec(input 0 "Input TS": MVTimeSeries|TimeSeries)
    """
    index: int
    name: str
    types: FrozenSet[type] = field(default_factory=frozenset)
    direction: str = 'input'

    def accepts(self, value: Any) -> bool:
        """Check whether a value is an instance of one of the socket types."""
        if not self.types:
            return True
        return isinstance(value, tuple(self.types))

    def __repr__(self) -> str:
        type_names = '|'.join(sorted(t.__name__ for t in self.types))
        return f'SocketSpec({self.direction} {self.index} "{self.name}": {type_names})'


def describe_sockets(item: Connectable, direction: Optional[str] = None) -> List[SocketSpec]:
    """
    Collect SocketSpecs for a node.

    Args:
        item: Node to describe
        direction: 'input', 'output', or None for both (inputs first)

    Returns:
        List of SocketSpec in socket order
    """
    specs: List[SocketSpec] = []
    if direction in (None, 'input'):
        for i in range(item.num_inputs()):
            specs.append(SocketSpec(
                index=i,
                name=item.get_input_name(i),
                types=frozenset(item.get_allowed_input_types_for(i)),
                direction='input',
            ))
    if direction in (None, 'output'):
        for i in range(item.num_outputs()):
            specs.append(SocketSpec(
                index=i,
                name=item.get_output_name(i),
                types=frozenset(item.get_output_types_for(i)),
                direction='output',
            ))
    return specs


def check_socket(socket: int, count: int, direction: str = 'input') -> None:
    """
    Raise InvalidSocketError unless ``0 <= socket < count``.

    Shared by node implementations so they report socket misuse uniformly.
    """
    if not isinstance(socket, int) or socket < 0 or socket >= count:
        raise InvalidSocketError(socket, count, direction)


def is_compatible(source: Connectable, source_socket: int,
                  target: Connectable, target_socket: int) -> bool:
    """
    Check whether an output socket may feed an input socket.

    Compatible when at least one produced type is accepted, either exactly
    or as a subclass.

    Raises:
        InvalidSocketError: If either socket is out of range
    """
    produced = source.get_output_types_for(source_socket)
    accepted = target.get_allowed_input_types_for(target_socket)
    for out_type in produced:
        for in_type in accepted:
            if issubclass(out_type, in_type):
                return True
    return False
