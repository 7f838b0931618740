"""
Unit tests for selector resolution.
"""

import pytest
from orbitwm.commands import (
    CardinalDirection,
    Closest,
    Cycle,
    CycleDirection,
    Focused,
    Index,
    Name,
    Window,
)
from orbitwm.selection import (
    closest_client,
    cycle_client,
    resolve_window,
    resolve_workspace,
)
from orbitwm.state import Client
from orbitwm.vector import Vector2D


def make_clients(*positions):
    """Clients 1..n at the given positions, in insertion order."""
    return {
        i: Client(i, Vector2D(*pos), Vector2D(100, 100))
        for i, pos in enumerate(positions, start=1)
    }


@pytest.mark.unit
class TestClosestClient:
    """Test the closest-window search."""

    def test_strict_half_plane(self):
        """Test candidates level with the reference are not on either side."""
        clients = make_clients((0, 0), (0, 50), (50, 0))

        assert closest_client(clients, clients[1], CardinalDirection.EAST) == clients[3]
        assert closest_client(clients, clients[1], CardinalDirection.SOUTH) == clients[2]
        assert closest_client(clients, clients[1], CardinalDirection.WEST) is None
        assert closest_client(clients, clients[1], CardinalDirection.NORTH) is None

    def test_not_a_cone(self):
        """Test a far diagonal candidate still counts as east."""
        clients = make_clients((0, 0), (1, 1000))

        assert closest_client(clients, clients[1], CardinalDirection.EAST) == clients[2]

    def test_squared_distance(self):
        """Test the nearest candidate by Euclidean distance wins."""
        clients = make_clients((0, 0), (100, 0), (30, 40))

        assert closest_client(clients, clients[1], CardinalDirection.EAST) == clients[3]

    def test_tie_goes_to_first_inserted(self):
        """Test equally distant candidates resolve to the earlier client."""
        clients = make_clients((0, 0), (30, 40), (30, -40))

        assert closest_client(clients, clients[1], CardinalDirection.EAST) == clients[2]

    def test_reference_is_never_selected(self):
        """Test a lone client has no neighbour."""
        clients = make_clients((0, 0))

        for direction in CardinalDirection:
            assert closest_client(clients, clients[1], direction) is None


@pytest.mark.unit
class TestCycleClient:
    """Test cycling through clients in insertion order."""

    def test_next_and_prev(self):
        """Test stepping forwards and backwards."""
        clients = make_clients((0, 0), (1, 1), (2, 2))

        assert cycle_client(clients, 1, CycleDirection.NEXT) == clients[2]
        assert cycle_client(clients, 2, CycleDirection.PREV) == clients[1]

    def test_wraps(self):
        """Test cycling wraps at both ends."""
        clients = make_clients((0, 0), (1, 1), (2, 2))

        assert cycle_client(clients, 3, CycleDirection.NEXT) == clients[1]
        assert cycle_client(clients, 1, CycleDirection.PREV) == clients[3]

    def test_without_focus(self):
        """Test Next starts at the first client and Prev at the last."""
        clients = make_clients((0, 0), (1, 1), (2, 2))

        assert cycle_client(clients, None, CycleDirection.NEXT) == clients[1]
        assert cycle_client(clients, None, CycleDirection.PREV) == clients[3]

    def test_empty(self):
        """Test cycling no clients gives nothing."""
        assert cycle_client({}, None, CycleDirection.NEXT) is None


@pytest.mark.unit
class TestResolve:
    """Test resolving selectors against a workspace."""

    def test_focused(self):
        """Test Focused resolves to the focused client only."""
        clients = make_clients((0, 0), (1, 1))

        assert resolve_window(clients, 2, Focused()) == clients[2]
        assert resolve_window(clients, None, Focused()) is None

    def test_window(self):
        """Test Window resolves by id."""
        clients = make_clients((0, 0))

        assert resolve_window(clients, None, Window(1)) == clients[1]
        assert resolve_window(clients, None, Window(7)) is None

    def test_closest_needs_focus(self):
        """Test Closest does not resolve without a focused client."""
        clients = make_clients((0, 0), (10, 0))

        assert resolve_window(clients, None, Closest(CardinalDirection.EAST)) is None
        assert resolve_window(clients, 1, Closest(CardinalDirection.EAST)) == clients[2]

    def test_cycle(self):
        """Test Cycle resolves relative to the focused client."""
        clients = make_clients((0, 0), (10, 0))

        assert resolve_window(clients, 1, Cycle(CycleDirection.NEXT)) == clients[2]

    def test_not_a_selector(self):
        """Test anything else is rejected."""
        with pytest.raises(TypeError):
            resolve_window({}, None, Index(0))

    def test_workspace_by_index(self):
        """Test Index resolves only within range."""
        names = ["1", "web", "mail"]

        assert resolve_workspace(names, Index(2)) == 2
        assert resolve_workspace(names, Index(3)) is None

    def test_workspace_by_name(self):
        """Test Name resolves to the workspace's position."""
        names = ["1", "web", "mail"]

        assert resolve_workspace(names, Name("web")) == 1
        assert resolve_workspace(names, Name("chat")) is None

    def test_not_a_workspace_selector(self):
        """Test window selectors are rejected."""
        with pytest.raises(TypeError):
            resolve_workspace(["1"], Focused())
