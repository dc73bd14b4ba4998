"""Graph algorithms over index-based adjacency lists."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from graph.models import CycleFinding

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from graph.models import ModuleGraph


def strongly_connected_components(
    adjacency: Sequence[Sequence[int]],
) -> list[list[int]]:
    """Return all strongly connected components using Tarjan's algorithm.

    Iterative so that deep import chains cannot exhaust the interpreter
    stack. Runs in O(V + E). Components are returned in the order Tarjan
    completes them, each sorted by node index.
    """
    count = len(adjacency)
    indices = [-1] * count
    low_link = [0] * count
    on_stack = [False] * count
    stack: list[int] = []
    sccs: list[list[int]] = []
    next_index = 0

    for root in range(count):
        if indices[root] != -1:
            continue

        work: list[tuple[int, int]] = [(root, 0)]
        while work:
            node, position = work.pop()
            if position == 0:
                indices[node] = next_index
                low_link[node] = next_index
                next_index += 1
                stack.append(node)
                on_stack[node] = True

            successors = adjacency[node]
            descended = False
            while position < len(successors):
                neighbor = successors[position]
                position += 1
                if indices[neighbor] == -1:
                    work.append((node, position))
                    work.append((neighbor, 0))
                    descended = True
                    break
                if on_stack[neighbor]:
                    low_link[node] = min(low_link[node], indices[neighbor])
            if descended:
                continue

            if low_link[node] == indices[node]:
                scc: list[int] = []
                while True:
                    member = stack.pop()
                    on_stack[member] = False
                    scc.append(member)
                    if member == node:
                        break
                sccs.append(sorted(scc))

            if work:
                parent = work[-1][0]
                low_link[parent] = min(low_link[parent], low_link[node])

    return sccs


def shortest_path(
    adjacency: Sequence[Sequence[int]],
    start: int,
    goal: int,
    allowed: Collection[int] | None = None,
) -> list[int] | None:
    """Breadth-first shortest path from ``start`` to ``goal``.

    When ``start == goal`` the shortest cycle through ``start`` is returned,
    without repeating ``start`` at the end. ``allowed`` restricts the walk
    to a node subset. Returns None when ``goal`` is unreachable.
    """
    parents: dict[int, int] = {}
    queue: deque[int] = deque()

    for neighbor in adjacency[start]:
        if allowed is not None and neighbor not in allowed:
            continue
        if neighbor == goal:
            return [start] if start == goal else [start, goal]
        if neighbor not in parents and neighbor != start:
            parents[neighbor] = start
            queue.append(neighbor)

    while queue:
        node = queue.popleft()
        for neighbor in adjacency[node]:
            if allowed is not None and neighbor not in allowed:
                continue
            if neighbor == goal:
                path = [node]
                while path[-1] != start:
                    path.append(parents[path[-1]])
                path.reverse()
                if start != goal:
                    path.append(goal)
                return path
            if neighbor not in parents and neighbor != start:
                parents[neighbor] = node
                queue.append(neighbor)

    return None


def _rotate_to_min(cycle: list[int]) -> tuple[int, ...]:
    pivot = cycle.index(min(cycle))
    return tuple(cycle[pivot:] + cycle[:pivot])


def find_cycles(adjacency: Sequence[Sequence[int]]) -> list[list[int]]:
    """Find minimal cycles covering every node that lies on any cycle.

    Each non-trivial strongly connected component is searched for the
    shortest cycle through each of its members not yet covered by an
    earlier cycle. Nodes outside non-trivial components never appear.

    Returns:
        Cycles as node-index lists, each rotated to start at its smallest
        index, sorted lexicographically.
    """
    found: set[tuple[int, ...]] = set()

    for scc in strongly_connected_components(adjacency):
        members = set(scc)
        if len(scc) == 1 and scc[0] not in adjacency[scc[0]]:
            continue

        covered: set[int] = set()
        for node in scc:
            if node in covered:
                continue
            cycle = shortest_path(adjacency, node, node, allowed=members)
            if cycle is None:
                msg = f"node {node} in a strongly connected component has no cycle"
                raise RuntimeError(msg)
            found.add(_rotate_to_min(cycle))
            covered.update(cycle)

    return [list(cycle) for cycle in sorted(found)]


def cycle_findings(graph: ModuleGraph) -> tuple[CycleFinding, ...]:
    """File-level import cycles of ``graph``, ignoring layer tags."""
    return tuple(
        CycleFinding(paths=tuple(graph.path_of(i) for i in cycle))
        for cycle in find_cycles(graph.adjacency)
    )


__all__ = [
    "cycle_findings",
    "find_cycles",
    "shortest_path",
    "strongly_connected_components",
]
