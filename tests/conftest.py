"""
Shared pytest fixtures for orbitwm tests.
"""

import types

import pytest
from Xlib import X, error

from orbitwm.config import Config
from orbitwm.state import State
from orbitwm.vector import Vector2D


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without an X server")


@pytest.fixture
def state():
    """Fresh registry with root 1 and child 2."""
    return State(root=1, child=2)


@pytest.fixture
def quadrant_state(state):
    """Four 100x100 clients laid out in a 2x2 grid.

    NE(0,0) NW(150,0)
    SE(0,150) SW(150,150)
    """
    size = Vector2D(100, 100)
    state.add_client(10, Vector2D(0, 0), size)
    state.add_client(11, Vector2D(150, 0), size)
    state.add_client(12, Vector2D(0, 150), size)
    state.add_client(13, Vector2D(150, 150), size)
    return state


@pytest.fixture
def fake_display():
    """In-memory stand-in for an Xlib display.

    Every request is appended to display.requests as
    (window id, request name, args).
    """

    class FakeWindow:
        def __init__(self, display, wid):
            self.display = display
            self.id = wid

        def __resource__(self):
            return self.id

        # Xlib packs window fields in events through __window__
        __window__ = __resource__

        def __repr__(self):
            return f"FakeWindow({self.id:#x})"

        def _record(self, name, *args, **kwargs):
            self.display.requests.append((self.id, name, args or kwargs))

        def map(self):
            self._record("map")

        def unmap(self):
            self._record("unmap")

        def configure(self, **kwargs):
            self._record("configure", **kwargs)

        def change_attributes(self, onerror=None, **kwargs):
            if onerror is not None and self.display.attribute_error is not None:
                onerror(self.display.attribute_error, None)
            self._record("change_attributes", **kwargs)

        def change_property(self, prop, type, format, data):
            self.display.properties[(self.id, prop)] = (type, format, data)
            self._record("change_property", prop, type, format, data)

        def get_full_property(self, prop, type):
            stored = self.display.properties.get((self.id, prop))
            if stored is None:
                return None
            prop_type, format, data = stored
            return types.SimpleNamespace(property_type=prop_type, format=format, value=data)

        def get_geometry(self):
            x, y, width, height = self.display.geometries.get(self.id, (0, 0, 100, 100))
            return types.SimpleNamespace(x=x, y=y, width=width, height=height)

        def change_save_set(self, mode):
            self._record("change_save_set", mode)

        def reparent(self, parent, x, y):
            self._record("reparent", parent.id, x, y)

        def set_input_focus(self, revert_to, time):
            self._record("set_input_focus", revert_to)

        def grab_button(self, button, modifiers, owner_events, event_mask, *args):
            self._record("grab_button", button, modifiers)

        def kill_client(self):
            self._record("kill_client")

        def send_event(self, event, event_mask=0, propagate=False, onerror=None):
            self._record("send_event", event)

        def create_window(self, x, y, width, height, border_width, depth, *args):
            return self.display.window(self.display.next_id())

    class FakeDisplay:
        def __init__(self):
            self.requests = []
            self.properties = {}
            self.geometries = {}
            self.atoms = {}
            self.windows = {}
            self.attribute_error = None
            self.flushed = 0
            self.closed = False
            self._next_id = 0x400000
            self.root = self.window(0x100)

        def next_id(self):
            self._next_id += 1
            return self._next_id

        def window(self, wid):
            if wid not in self.windows:
                self.windows[wid] = FakeWindow(self, wid)
            return self.windows[wid]

        def create_resource_object(self, kind, wid):
            assert kind == "window"
            return self.window(wid)

        def screen(self, sno=None):
            return types.SimpleNamespace(root=self.root)

        def intern_atom(self, name):
            if name not in self.atoms:
                self.atoms[name] = 100 + len(self.atoms)
            return self.atoms[name]

        def set_input_focus(self, focus, revert_to, time):
            self.requests.append((focus, "set_input_focus", (revert_to,)))

        def allow_events(self, mode, time):
            pass

        def sync(self):
            pass

        def flush(self):
            self.flushed += 1

        def close(self):
            self.closed = True

        def get_display_name(self):
            return ":99"

        def next_event(self):
            raise error.ConnectionClosedError("server")

        def requests_for(self, wid, name=None):
            return [
                args
                for rid, rname, args in self.requests
                if rid == wid and (name is None or rname == name)
            ]

    return FakeDisplay()


@pytest.fixture
def config(tmp_path):
    """Config with a socket under tmp_path."""
    return Config(socket_path=tmp_path / "orbitwm.sock")


@pytest.fixture
def make_event(fake_display):
    """Factory for X events addressed to fake windows."""

    def make(event_type, window, **fields):
        return types.SimpleNamespace(
            type=event_type, window=fake_display.window(window), **fields
        )

    return make


@pytest.fixture
def button_state():
    """State mask for the modifier plus a held button."""

    def mask(button_mask):
        return X.Mod4Mask | button_mask

    return mask
