"""
orbitwm

A floating, reparenting window manager for X11 with a command socket.

This package provides:
- A registry of workspaces, managed windows and focus history
- Window and workspace selectors, including closest-in-direction lookup
- A JSON command protocol over a Unix domain socket
- A window manager that serializes X events and remote commands

Example usage:
    from orbitwm import Config, WindowManager

    config = Config(border_width=3, focused_border_color="#5294e2")
    wm = WindowManager(config)
    wm.run()

Or control a running instance:
    orbitwm focus --closest east
    orbitwm activate-workspace --name web
"""

__version__ = "0.1.0"

from .vector import Vector2D

from .commands import (
    CardinalDirection,
    CycleDirection,
    Focused,
    Window,
    Closest,
    Cycle,
    Index,
    Name,
    Quit,
    Focus,
    Close,
    AddWorkspace,
    RenameWorkspace,
    ActivateWorkspace,
    SetBorderWidth,
    SetBorderColor,
    SetFocusedBorderColor,
    CommandDecodeError,
    encode_command,
    decode_command,
)

from .state import (
    Client,
    Workspace,
    State,
    StateError,
    ClientNotFound,
    ClientAlreadyExists,
    WorkspaceNotFound,
    WorkspaceAlreadyExists,
)

from .config import Config
from .ipc import IPCServer, send_command
from .window_manager import WindowManager, AnotherWindowManagerError
