"""
Directed graph of connectable time-series nodes.

Supports:
- Nodes wrapping any Connectable (transforms, models, sources)
- Socket-labelled directed links between nodes
- Structural edits with dense index renumbering
- Cascading recomputation from a changed node

Key Design Principles:
- Indices are positional and dense (0..N-1 after every edit)
- Identity is by node id token or wrapped instance, never by value
- Links are immutable; renumbering replaces them
- Every link lives twice: in the source's outgoing list and the
  destination's incoming list
- "Not found" is a silent no-op for structural edits

Example:
    >>> graph = DirectedGraph()
    >>> x = graph.add_node(SeriesSource(series_x))
    >>> s = graph.add_node(ExpSmoother(smooth_factor=0.5))
    >>> graph.add_directional_link(x.item, 0, s.item, 0)
    >>> graph.cascade_from(x)
    >>> smoothed = s.item.get_output(0)
"""

from dataclasses import dataclass, field, replace
from typing import List, Dict, Any, Optional, Iterator, Sequence, Union
from collections import deque
import itertools
import logging

from .interface import Connectable, CycleDetectedError


logger = logging.getLogger(__name__)


# Identity token assigned by DirectedGraph.add_node
NodeId = int


@dataclass(frozen=True)
class Link:
    """
    Directed, socket-labelled edge.

    Attributes:
        start: Index of the source node
        start_socket: Output socket on the source node
        end: Index of the destination node
        end_socket: Input socket on the destination node

    Example:
        >>> link = Link(start=0, start_socket=0, end=2, end_socket=1)
        >>> link
        Link(0:0 -> 2:1)
    """
    start: int
    start_socket: int
    end: int
    end_socket: int

    def shifted_for_removal(self, deleted_index: int) -> 'Link':
        """Return a copy with every endpoint >= deleted_index moved down by one."""
        start = self.start - 1 if self.start >= deleted_index else self.start
        end = self.end - 1 if self.end >= deleted_index else self.end
        if start == self.start and end == self.end:
            return self
        return replace(self, start=start, end=end)

    def __repr__(self) -> str:
        return f"Link({self.start}:{self.start_socket} -> {self.end}:{self.end_socket})"


@dataclass(eq=False)
class NodeRecord:
    """
    Graph-side wrapper around one Connectable.

    Holds the connectivity bookkeeping for its item. Identity is the
    node_id token; equality is object identity.

    Attributes:
        item: Wrapped node (exclusively owned by this record)
        node_id: Identity token assigned by the owning graph
        placement: Opaque host metadata (e.g. canvas coordinates), ignored
            by all connectivity logic
        outgoing_links: Links leaving this node, in insertion order
        incoming_links: Links arriving at this node, in insertion order
    """
    item: Connectable
    node_id: NodeId
    placement: Any = None
    outgoing_links: List[Link] = field(default_factory=list)
    incoming_links: List[Link] = field(default_factory=list)

    def adjust_for_node_removal(self, deleted_index: int) -> None:
        """
        Renumber every link after the node at deleted_index was removed.

        Must run on every surviving record, not only on neighbours, because
        any link that numerically crosses the deleted index shifts.
        """
        self.outgoing_links = [l.shifted_for_removal(deleted_index) for l in self.outgoing_links]
        self.incoming_links = [l.shifted_for_removal(deleted_index) for l in self.incoming_links]

    def remove_outgoing_links_to(self, target_index: int, target_socket: int) -> int:
        """
        Remove all outgoing links ending at (target_index, target_socket).

        Returns:
            Number of links removed (0 is a valid no-op)
        """
        before = len(self.outgoing_links)
        self.outgoing_links = [
            l for l in self.outgoing_links
            if not (l.end == target_index and l.end_socket == target_socket)
        ]
        return before - len(self.outgoing_links)

    def remove_incoming_links_from(self, source_index: int, socket: int) -> int:
        """
        Remove all incoming links from source_index arriving at socket.

        Returns:
            Number of links removed (0 is a valid no-op)
        """
        before = len(self.incoming_links)
        self.incoming_links = [
            l for l in self.incoming_links
            if not (l.start == source_index and l.end_socket == socket)
        ]
        return before - len(self.incoming_links)

    def __repr__(self) -> str:
        return (
            f"NodeRecord(id={self.node_id}, item={type(self.item).__name__}, "
            f"in={len(self.incoming_links)}, out={len(self.outgoing_links)})"
        )


# Anything that resolves to a node: the record, its id token, or the item
NodeRef = Union[NodeRecord, NodeId, Connectable]


class DirectedGraph:
    """
    Ordered arena of NodeRecords joined by socket-labelled links.

    The graph is the only supported mutation surface. It keeps indices
    dense and contiguous and keeps every link mirrored between the
    source's outgoing list and the destination's incoming list.

    Features:
    - Identity lookups by node id, record or wrapped instance
    - Structural edits that never fail on "not found"
    - Cascade propagation with cycle detection
    - Topological ordering and integrity checks

    Example:
        >>> graph = DirectedGraph()
        >>> a = graph.add_node(SeriesSource(series))
        >>> b = graph.add_node(ExpSmoother())
        >>> graph.add_directional_link(a.item, 0, b.item, 0)
        >>> graph.get_node_index(b.item)
        1
        >>> graph.remove_node(a)
        >>> graph.get_node_index(b.item)
        0
    """

    def __init__(self):
        """Initialize empty graph."""
        self._nodes: List[NodeRecord] = []
        self._ids = itertools.count()

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Sequence[NodeRecord]:
        """Records in index order (read-only view)."""
        return tuple(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[NodeRecord]:
        return iter(list(self._nodes))

    def __getitem__(self, index: int) -> NodeRecord:
        return self._nodes[index]

    def links(self) -> Iterator[Link]:
        """Iterate over every link once (from the outgoing side)."""
        for record in self._nodes:
            yield from record.outgoing_links

    def successors(self, index: int) -> List[int]:
        """Destination indices of a node's outgoing links, in link order."""
        return [link.end for link in self._nodes[index].outgoing_links]

    def predecessors(self, index: int) -> List[int]:
        """Source indices of a node's incoming links, in link order."""
        return [link.start for link in self._nodes[index].incoming_links]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_node_index(self, ref: NodeRef) -> int:
        """
        Position of the record matching ref, or -1.

        Args:
            ref: A NodeRecord, a node id token, or the wrapped item.
                Records and items are matched by identity, never by value.
                A bare int is always a node_id token, not a position; ids
                keep their value when earlier nodes are removed.

        Returns:
            Index in 0..N-1, or -1 if not found
        """
        if isinstance(ref, NodeRecord):
            for i, record in enumerate(self._nodes):
                if record is ref:
                    return i
            return -1

        if isinstance(ref, int) and not isinstance(ref, bool):
            for i, record in enumerate(self._nodes):
                if record.node_id == ref:
                    return i
            return -1

        for i, record in enumerate(self._nodes):
            if record.item is ref:
                return i
        return -1

    def get_node_containing(self, item: NodeRef) -> Optional[NodeRecord]:
        """Record wrapping item, or None."""
        index = self.get_node_index(item)
        if index == -1:
            return None
        return self._nodes[index]

    def get_node(self, node_id: NodeId) -> Optional[NodeRecord]:
        """Record with the given id token, or None."""
        return self.get_node_containing(node_id)

    def has_node(self, ref: NodeRef) -> bool:
        """Check if a node is in the graph."""
        return self.get_node_index(ref) != -1

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def add_node(self, item: Connectable, placement: Any = None) -> NodeRecord:
        """
        Wrap item in a new record appended at the end of the graph.

        Args:
            item: Node implementing the Connectable protocol
            placement: Opaque host metadata stored on the record

        Returns:
            The new NodeRecord; its index is the previous graph length

        Raises:
            TypeError: If item does not implement Connectable
            ValueError: If this exact item is already in the graph
        """
        if isinstance(item, NodeRecord) or not isinstance(item, Connectable):
            raise TypeError(
                f"Graph nodes must implement the Connectable protocol, "
                f"got {type(item).__name__}"
            )
        if self.get_node_index(item) != -1:
            raise ValueError(f"{type(item).__name__} instance already exists in graph")

        record = NodeRecord(item=item, node_id=next(self._ids), placement=placement)
        self._nodes.append(record)
        logger.debug("Added node %d (%s) at index %d",
                     record.node_id, type(item).__name__, len(self._nodes) - 1)
        return record

    def remove_node(self, ref: NodeRef) -> None:
        """
        Remove a node and every link touching it.

        Incoming and outgoing links are stripped (mirrors included), the
        record is deleted, then every survivor is renumbered. Removing a
        node that is not in the graph is a no-op.
        """
        index = self.get_node_index(ref)
        if index == -1:
            return

        self.remove_all_incoming_links(index)
        self.remove_all_outgoing_links(index)

        record = self._nodes.pop(index)
        for survivor in self._nodes:
            survivor.adjust_for_node_removal(index)

        logger.debug("Removed node %d from index %d", record.node_id, index)

    def remove_all_incoming_links(self, index: int) -> None:
        """
        Drop every incoming link of the node at index.

        Each source first drops its mirrored outgoing entry, then the
        local list is cleared. Mirrors are matched by the socket recorded
        on the link, so links wired before the item shrank its input count
        are still released.
        """
        record = self._nodes[index]
        for link in record.incoming_links:
            self._nodes[link.start].remove_outgoing_links_to(index, link.end_socket)
        record.incoming_links = []

    def remove_all_outgoing_links(self, index: int) -> None:
        """
        Drop every outgoing link of the node at index.

        Each destination first drops its mirrored incoming entry, then the
        local list is cleared.
        """
        record = self._nodes[index]
        for link in record.outgoing_links:
            self._nodes[link.end].remove_incoming_links_from(index, link.end_socket)
        record.outgoing_links = []

    def add_directional_link(
        self,
        from_item: NodeRef,
        from_socket: int,
        to_item: NodeRef,
        to_socket: int
    ) -> Optional[Link]:
        """
        Connect an output socket to an input socket.

        No socket-bounds or cycle checks are made here; the node contract
        validates sockets when values flow. Duplicate links are allowed.

        Args:
            from_item: Source node (record, id token, or item)
            from_socket: Output socket on the source
            to_item: Destination node (record, id token, or item)
            to_socket: Input socket on the destination

        Returns:
            The new Link, or None if either endpoint is not in the graph
        """
        start = self.get_node_index(from_item)
        end = self.get_node_index(to_item)
        if start == -1 or end == -1:
            return None

        link = Link(start=start, start_socket=from_socket, end=end, end_socket=to_socket)
        self._nodes[start].outgoing_links.append(link)
        self._nodes[end].incoming_links.append(link)
        logger.debug("Linked %r", link)
        return link

    def remove_directional_links_to(self, to_item: NodeRef, to_socket: int) -> int:
        """
        Disconnect every link arriving at (to_item, to_socket).

        Handles duplicate links; mirrored outgoing entries on the sources
        are dropped as well. Unknown nodes or unconnected sockets are
        no-ops.

        Returns:
            Number of incoming links removed
        """
        end = self.get_node_index(to_item)
        if end == -1:
            return 0

        target = self._nodes[end]
        removed = 0
        i = 0
        while i < len(target.incoming_links):
            link = target.incoming_links[i]
            if link.end_socket == to_socket:
                del target.incoming_links[i]
                self._nodes[link.start].remove_outgoing_links_to(end, to_socket)
                removed += 1
            else:
                i += 1

        if removed:
            logger.debug("Removed %d link(s) into %d:%d", removed, end, to_socket)
        return removed

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------

    def _push_outputs(self, index: int) -> List[Link]:
        """
        Feed a node's current outputs into every destination input.

        Returns:
            The links pushed, in outgoing-link order (empty for leaf nodes)
        """
        record = self._nodes[index]
        if record.item.num_outputs() == 0:
            return []

        links = list(record.outgoing_links)
        for link in links:
            value = record.item.get_output(link.start_socket)
            self._nodes[link.end].item.set_input(link.end_socket, value, link)
        return links

    def cascade_from(self, ref: NodeRef) -> List[Link]:
        """
        Propagate a change at one node to all its dependents.

        Each visited node first pushes its outputs along all of its
        outgoing links (the destination's set_input performs its own
        recompute), then the traversal continues from each destination
        in link order. A node reachable along two paths is visited once
        per path.

        Args:
            ref: The node whose outputs just changed (record, item or
                node_id token; an int is never read as an index)

        Returns:
            Links pushed, in push order

        Raises:
            CycleDetectedError: If the traversal re-enters a node on its
                current path
        """
        index = self.get_node_index(ref)
        if index == -1:
            return []

        pushed = self._push_outputs(index)
        path = [index]
        on_path = {index}
        stack = [iter([link.end for link in pushed])]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                on_path.discard(path.pop())
                continue

            if child in on_path:
                cycle = path[path.index(child):] + [child]
                raise CycleDetectedError(cycle)

            links = self._push_outputs(child)
            pushed.extend(links)
            path.append(child)
            on_path.add(child)
            stack.append(iter([link.end for link in links]))

        logger.debug("Cascade from index %d pushed %d link(s)", index, len(pushed))
        return pushed

    # ------------------------------------------------------------------
    # Ordering and validation
    # ------------------------------------------------------------------

    def detect_cycles(self) -> List[List[int]]:
        """
        Find directed cycles.

        Returns:
            One cycle per strongly connected back edge found, each as a
            list of indices with the first index repeated at the end
        """
        cycles: List[List[int]] = []
        visited = set()

        for root in range(len(self._nodes)):
            if root in visited:
                continue
            visited.add(root)
            path = [root]
            on_path = {root}
            stack = [iter(self.successors(root))]
            while stack:
                child = next(stack[-1], None)
                if child is None:
                    stack.pop()
                    on_path.discard(path.pop())
                    continue
                if child in on_path:
                    cycles.append(path[path.index(child):] + [child])
                    continue
                if child in visited:
                    continue
                visited.add(child)
                path.append(child)
                on_path.add(child)
                stack.append(iter(self.successors(child)))

        return cycles

    def topological_order(self) -> List[int]:
        """
        Node indices in dependency order (Kahn's algorithm).

        Ties are broken by index so the order is deterministic.

        Raises:
            CycleDetectedError: If the graph has a cycle
        """
        in_degree = [len(record.incoming_links) for record in self._nodes]
        queue = deque(i for i, degree in enumerate(in_degree) if degree == 0)
        order: List[int] = []

        while queue:
            index = queue.popleft()
            order.append(index)
            for child in self.successors(index):
                in_degree[child] -= 1
                if in_degree[child] == 0:
                    queue.append(child)

        if len(order) != len(self._nodes):
            cycles = self.detect_cycles()
            raise CycleDetectedError(cycles[0] if cycles else [])
        return order

    def check_integrity(self) -> bool:
        """
        Verify link indices and mirror consistency.

        Returns:
            True if every invariant holds

        Raises:
            ValueError: Describing the first violation found
        """
        n = len(self._nodes)
        for index, record in enumerate(self._nodes):
            for link in record.outgoing_links:
                if link.start != index:
                    raise ValueError(f"Outgoing {link!r} stored on node {index}")
                if not 0 <= link.end < n:
                    raise ValueError(f"{link!r} ends outside 0..{n - 1}")
                mirrors = self._nodes[link.end].incoming_links.count(link)
                if mirrors != record.outgoing_links.count(link):
                    raise ValueError(f"{link!r} has {mirrors} incoming mirror(s)")
            for link in record.incoming_links:
                if link.end != index:
                    raise ValueError(f"Incoming {link!r} stored on node {index}")
                if not 0 <= link.start < n:
                    raise ValueError(f"{link!r} starts outside 0..{n - 1}")
                mirrors = self._nodes[link.start].outgoing_links.count(link)
                if mirrors != record.incoming_links.count(link):
                    raise ValueError(f"{link!r} has {mirrors} outgoing mirror(s)")
        return True

    def summary(self) -> Dict[str, Any]:
        """Node and link counts plus per-node degree information."""
        return {
            'num_nodes': len(self._nodes),
            'num_links': sum(len(r.outgoing_links) for r in self._nodes),
            'nodes': [
                {
                    'index': i,
                    'id': r.node_id,
                    'type': type(r.item).__name__,
                    'in': len(r.incoming_links),
                    'out': len(r.outgoing_links),
                    'valid': bool(getattr(r.item, 'is_valid', False)),
                }
                for i, r in enumerate(self._nodes)
            ],
        }

    def __repr__(self) -> str:
        num_links = sum(len(r.outgoing_links) for r in self._nodes)
        return f"DirectedGraph(nodes={len(self._nodes)}, links={num_links})"
