"""
EWMH / ICCCM Property Helpers

Single-shot wrappers around the X properties and client messages the
window manager uses to talk to pagers, panels and clients. They hold no
state; X errors from requests with replies propagate to the caller.

See: https://specifications.freedesktop.org/wm-spec/wm-spec-1.3.html
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Sequence

from Xlib import X, Xatom, error
from Xlib.protocol import event

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window


class Atoms:
    """Interned atoms used by the window manager."""

    NAMES = (
        # _NET_DESKTOP_NAMES needs UTF8_STRING rather than STRING
        "UTF8_STRING",
        # ICCCM
        "WM_PROTOCOLS",
        "WM_DELETE_WINDOW",
        # Supported EWMH hints
        "_NET_SUPPORTED",
        "_NET_ACTIVE_WINDOW",
        "_NET_SUPPORTING_WM_CHECK",
        "_NET_WM_NAME",
        "_NET_NUMBER_OF_DESKTOPS",
        "_NET_DESKTOP_NAMES",
        "_NET_CURRENT_DESKTOP",
        # EWMH window types
        "_NET_WM_WINDOW_TYPE",
        "_NET_WM_WINDOW_TYPE_DOCK",
    )

    def __init__(self, display: "Display"):
        for name in self.NAMES:
            setattr(self, name.lstrip("_"), display.intern_atom(name))

    def supported(self) -> List[int]:
        """The EWMH atoms advertised through _NET_SUPPORTED."""
        return [
            getattr(self, name.lstrip("_"))
            for name in self.NAMES
            if name.startswith("_NET_")
        ]


def set_supported(atoms: Atoms, root: "Window"):
    """Set _NET_SUPPORTED on the root window."""
    root.change_property(atoms.NET_SUPPORTED, Xatom.ATOM, 32, atoms.supported())


def set_supporting_wm_check(atoms: Atoms, root: "Window", child: "Window"):
    """Point _NET_SUPPORTING_WM_CHECK at child, on both root and child.

    This is how clients tell that a compliant window manager is active.
    """
    child.change_property(atoms.NET_SUPPORTING_WM_CHECK, Xatom.WINDOW, 32, [child.id])
    root.change_property(atoms.NET_SUPPORTING_WM_CHECK, Xatom.WINDOW, 32, [child.id])


def set_wm_name(atoms: Atoms, child: "Window", name: str):
    """Set _NET_WM_NAME on the check window."""
    child.change_property(atoms.NET_WM_NAME, atoms.UTF8_STRING, 8, name.encode("utf-8"))


def set_active_window(atoms: Atoms, root: "Window", window: Optional[int]):
    """Set _NET_ACTIVE_WINDOW on the root window (None means no window)."""
    root.change_property(
        atoms.NET_ACTIVE_WINDOW, Xatom.WINDOW, 32, [window if window else X.NONE]
    )


def set_number_of_desktops(atoms: Atoms, root: "Window", count: int):
    root.change_property(atoms.NET_NUMBER_OF_DESKTOPS, Xatom.CARDINAL, 32, [count])


def set_desktop_names(atoms: Atoms, root: "Window", names: Sequence[str]):
    """Set _NET_DESKTOP_NAMES: a list of null-terminated UTF-8 strings."""
    data = b"".join(name.encode("utf-8") + b"\0" for name in names)
    root.change_property(atoms.NET_DESKTOP_NAMES, atoms.UTF8_STRING, 8, data)


def set_current_desktop(atoms: Atoms, root: "Window", index: int):
    root.change_property(atoms.NET_CURRENT_DESKTOP, Xatom.CARDINAL, 32, [index])


def _get_atom_list(window: "Window", prop: int) -> List[int]:
    reply = window.get_full_property(prop, Xatom.ATOM)
    if reply is None or reply.format != 32:
        return []
    return list(reply.value)


def get_wm_window_type(atoms: Atoms, window: "Window") -> List[int]:
    """Get the _NET_WM_WINDOW_TYPE atoms of a window."""
    return _get_atom_list(window, atoms.NET_WM_WINDOW_TYPE)


def get_wm_protocols(atoms: Atoms, window: "Window") -> List[int]:
    """Get the WM_PROTOCOLS atoms of a window.

    Each atom names a protocol the client is willing to take part in,
    e.g. WM_DELETE_WINDOW for graceful close.
    """
    return _get_atom_list(window, atoms.WM_PROTOCOLS)


def send_close_request(display: "Display", atoms: Atoms, window: "Window"):
    """Ask a client to close a window via WM_DELETE_WINDOW.

    The request is checked: an X error is raised to the caller.
    """
    message = event.ClientMessage(
        window=window,
        client_type=atoms.WM_PROTOCOLS,
        data=(32, [atoms.WM_DELETE_WINDOW, X.CurrentTime, 0, 0, 0]),
    )

    ec = error.CatchError()
    window.send_event(message, event_mask=X.NoEventMask, propagate=False, onerror=ec)
    display.sync()

    err = ec.get_error()
    if err:
        raise err
