"""
Window and Workspace Registry

The in-memory model of the window manager: workspaces, the clients each one
holds, focus history and drag-gesture anchors. Only the dispatch thread ever
touches a State, so nothing here is locked.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .commands import (
    CardinalDirection,
    Window,
    WindowSelector,
    WorkspaceSelector,
)
from .selection import closest_client, resolve_window, resolve_workspace
from .vector import Vector2D

MIN_CLIENT_SIZE = Vector2D(32, 32)


class StateError(Exception):
    """Base class for recoverable registry errors."""


class ClientNotFound(StateError):
    def __init__(self, selector=None):
        super().__init__(f"Client not found: {selector!r}" if selector else "Client not found")
        self.selector = selector


class ClientAlreadyExists(StateError):
    def __init__(self, window: int):
        super().__init__(f"Client already exists: {window:#x}")
        self.window = window


class WorkspaceNotFound(StateError):
    def __init__(self, selector=None):
        super().__init__(
            f"Workspace not found: {selector!r}" if selector else "Workspace not found"
        )
        self.selector = selector


class WorkspaceAlreadyExists(StateError):
    def __init__(self, name: str):
        super().__init__(f"Workspace already exists: {name!r}")
        self.name = name


@dataclass
class Client:
    """Everything the manager knows about a managed top-level window."""

    window: int
    pos: Vector2D
    size: Vector2D


@dataclass
class Workspace:
    """A named set of clients, kept in insertion order."""

    name: str
    clients: Dict[int, Client] = field(default_factory=dict)


class State:
    """Registry of workspaces, clients and focus.

    There is always at least one workspace; a fresh State starts with a
    single workspace named "1" which is active.
    """

    def __init__(self, root: int = 0, child: int = 0):
        # The root window of the managed screen
        self.root = root
        # Our own input-only window, holding the EWMH check properties
        self.child = child

        self.workspaces: Dict[str, Workspace] = {}
        self.active_workspace = 0

        self._focused: Optional[int] = None
        self._last_focused: Optional[int] = None

        # Cursor and frame positions at the start of a move/resize gesture
        self.drag_start_pos = Vector2D()
        self.drag_start_frame_pos = Vector2D()

        self.add_workspace()

    # Focus

    @property
    def focused(self) -> Optional[int]:
        return self._focused

    @property
    def last_focused(self) -> Optional[int]:
        return self._last_focused

    def _set_focused(self, window: Optional[int]):
        self._last_focused = self._focused
        self._focused = window

    # Workspaces

    def workspaces_names(self) -> List[str]:
        """Workspace names in order."""
        return list(self.workspaces)

    def get_active_workspace(self) -> Workspace:
        return list(self.workspaces.values())[self.active_workspace]

    def active_workspace_clients(self) -> Dict[int, Client]:
        return self.get_active_workspace().clients

    def add_workspace(self, name: Optional[str] = None) -> Workspace:
        """Append an empty workspace.

        Args:
            name: Workspace name, defaults to its 1-based ordinal

        Raises:
            WorkspaceAlreadyExists: If the name is taken
        """
        if name is None:
            name = str(len(self.workspaces) + 1)
        if name in self.workspaces:
            raise WorkspaceAlreadyExists(name)

        workspace = Workspace(name)
        self.workspaces[name] = workspace
        return workspace

    def select_workspace(self, selector: WorkspaceSelector) -> int:
        """Resolve a workspace selector to an index without changing anything."""
        index = resolve_workspace(self.workspaces_names(), selector)
        if index is None:
            raise WorkspaceNotFound(selector)
        return index

    def rename_workspace(self, selector: WorkspaceSelector, new_name: str) -> Workspace:
        """Rename a workspace, keeping its clients and its position.

        Raises:
            WorkspaceNotFound: If the selector does not resolve
            WorkspaceAlreadyExists: If another workspace already uses new_name
        """
        index = self.select_workspace(selector)
        workspace = list(self.workspaces.values())[index]

        if workspace.name == new_name:
            return workspace
        if new_name in self.workspaces:
            raise WorkspaceAlreadyExists(new_name)

        old_name = workspace.name
        workspace.name = new_name
        self.workspaces = {
            (new_name if name == old_name else name): ws
            for name, ws in self.workspaces.items()
        }
        return workspace

    def activate_workspace(self, selector: WorkspaceSelector) -> int:
        """Make a workspace the active one.

        Focus does not carry over: switching to a different workspace clears
        both the focused and the last focused window.

        Returns:
            The index of the now active workspace

        Raises:
            WorkspaceNotFound: If the selector does not resolve
        """
        index = self.select_workspace(selector)
        if index != self.active_workspace:
            self._focused = None
            self._last_focused = None
            self.active_workspace = index
        return index

    # Clients

    def _find_workspace(self, window: int) -> Optional[Workspace]:
        for workspace in self.workspaces.values():
            if window in workspace.clients:
                return workspace
        return None

    def _get_client(self, window: int) -> Client:
        client = self.active_workspace_clients().get(window)
        if client is None:
            raise ClientNotFound(Window(window))
        return client

    def add_client(self, window: int, pos: Vector2D, size: Vector2D) -> Client:
        """Manage a new window in the active workspace.

        Raises:
            ClientAlreadyExists: If the window is already managed
        """
        if self._find_workspace(window) is not None:
            raise ClientAlreadyExists(window)

        client = Client(window, pos, size)
        self.active_workspace_clients()[window] = client
        return client

    def _forget(self, window: int):
        if self._focused == window:
            self._focused = None
        if self._last_focused == window:
            self._last_focused = None

    def remove_client(self, selector: WindowSelector) -> Client:
        """Stop managing the client a selector resolves to.

        If it was focused, focus is cleared (last focused is not promoted).

        Raises:
            ClientNotFound: If the selector does not resolve in the active workspace
        """
        client = self.select_client(selector)
        del self.active_workspace_clients()[client.window]
        self._forget(client.window)
        return client

    def remove_window(self, window: int) -> Client:
        """Stop managing a window, whichever workspace holds it.

        Raises:
            ClientNotFound: If no workspace holds the window
        """
        workspace = self._find_workspace(window)
        if workspace is None:
            raise ClientNotFound(Window(window))

        client = workspace.clients.pop(window)
        self._forget(window)
        return client

    def drag_client(self, window: int, mouse_pos: Vector2D) -> Client:
        """Move a client so it follows the cursor's delta since the gesture began."""
        client = self._get_client(window)
        client.pos = self.drag_start_frame_pos + mouse_pos - self.drag_start_pos
        return client

    def drag_resize_client(self, window: int, mouse_pos: Vector2D) -> Client:
        """Resize a client so its bottom-right corner follows the cursor."""
        client = self._get_client(window)
        client.size = (mouse_pos - client.pos).max(MIN_CLIENT_SIZE)
        return client

    def teleport_client(self, window: int, pos: Vector2D) -> Client:
        client = self._get_client(window)
        client.pos = pos
        return client

    def select_client(self, selector: WindowSelector) -> Client:
        """Resolve a selector in the active workspace.

        Raises:
            ClientNotFound: If it does not resolve
        """
        client = resolve_window(self.active_workspace_clients(), self._focused, selector)
        if client is None:
            raise ClientNotFound(selector)
        return client

    def focus_client(self, selector: WindowSelector) -> Optional[Client]:
        """Focus a client, remembering the previous focus.

        A selector naming the root window clears focus and returns None.

        Raises:
            ClientNotFound: If the selector does not resolve
        """
        if isinstance(selector, Window) and selector.window == self.root:
            self._set_focused(None)
            return None

        client = self.select_client(selector)
        self._set_focused(client.window)
        return client

    def focus_closest_client(
        self, selector: WindowSelector, direction: CardinalDirection
    ) -> Optional[Client]:
        """Focus the closest client in a direction from the selected one.

        Returns:
            The newly focused client, or None (focus unchanged) if no client
            lies in that direction

        Raises:
            ClientNotFound: If the reference selector does not resolve
        """
        reference = self.select_client(selector)
        closest = closest_client(self.active_workspace_clients(), reference, direction)
        if closest is None:
            return None

        self._set_focused(closest.window)
        return closest

