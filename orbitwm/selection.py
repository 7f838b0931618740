"""
Selector Resolution

Pure functions that map a selector onto the registry's current contents.
Selectors are resolved at the moment a command is applied and never cached.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from .commands import (
    CardinalDirection,
    Closest,
    Cycle,
    CycleDirection,
    Focused,
    Index,
    Name,
    Window,
    WindowSelector,
    WorkspaceSelector,
)

if TYPE_CHECKING:
    from .state import Client


def _on_side(candidate: "Client", reference: "Client", direction: CardinalDirection) -> bool:
    """Half-plane test: is candidate strictly on the given side of reference?"""
    if direction is CardinalDirection.EAST:
        return candidate.pos.x > reference.pos.x
    if direction is CardinalDirection.WEST:
        return candidate.pos.x < reference.pos.x
    if direction is CardinalDirection.NORTH:
        return candidate.pos.y < reference.pos.y
    return candidate.pos.y > reference.pos.y


def closest_client(
    clients: Mapping[int, "Client"],
    reference: "Client",
    direction: CardinalDirection,
) -> Optional["Client"]:
    """Find the client nearest to reference in the given direction.

    Distance is squared Euclidean between window positions; only relative
    order matters so no square root is taken. Ties go to the client that
    comes first in the mapping's iteration order.

    Args:
        clients: Window id -> client, in workspace insertion order
        reference: The client to measure from (never selected itself)
        direction: Which half-plane candidates must lie in

    Returns:
        The closest qualifying client, or None if there is none
    """
    closest = None
    min_distance = None

    for client in clients.values():
        if client.window == reference.window:
            continue
        if not _on_side(client, reference, direction):
            continue

        delta = client.pos - reference.pos
        distance = delta.x * delta.x + delta.y * delta.y
        if min_distance is None or distance < min_distance:
            min_distance = distance
            closest = client

    return closest


def cycle_client(
    clients: Mapping[int, "Client"],
    focused: Optional[int],
    direction: CycleDirection,
) -> Optional["Client"]:
    """Step through clients in insertion order, wrapping at both ends.

    With nothing focused (or a focused id not in clients), Next picks the
    first client and Prev the last.
    """
    windows = list(clients)
    if not windows:
        return None

    step = 1 if direction is CycleDirection.NEXT else -1
    if focused not in clients:
        return clients[windows[0] if step == 1 else windows[-1]]

    idx = windows.index(focused)
    return clients[windows[(idx + step) % len(windows)]]


def resolve_window(
    clients: Mapping[int, "Client"],
    focused: Optional[int],
    selector: WindowSelector,
) -> Optional["Client"]:
    """Resolve a window selector against one workspace's clients."""
    if isinstance(selector, Focused):
        return clients.get(focused) if focused is not None else None

    if isinstance(selector, Window):
        return clients.get(selector.window)

    if isinstance(selector, Closest):
        reference = clients.get(focused) if focused is not None else None
        if reference is None:
            return None
        return closest_client(clients, reference, selector.direction)

    if isinstance(selector, Cycle):
        return cycle_client(clients, focused, selector.direction)

    raise TypeError(f"Not a window selector: {selector!r}")


def resolve_workspace(names: Sequence[str], selector: WorkspaceSelector) -> Optional[int]:
    """Resolve a workspace selector to an index into names."""
    if isinstance(selector, Index):
        return selector.index if 0 <= selector.index < len(names) else None

    if isinstance(selector, Name):
        try:
            return list(names).index(selector.name)
        except ValueError:
            return None

    raise TypeError(f"Not a workspace selector: {selector!r}")
