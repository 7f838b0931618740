"""
X11 Window Manager Implementation

Owns the display connection and the registry. Setup takes over the root
window and starts the event reader and IPC threads; Serve then applies
every event and command from the inbox on this one thread and reflects
the resulting state back to the X server.
"""

from __future__ import annotations
import os
import time
from typing import Optional

from pubsub import pub
from Xlib import X, error

from . import ewmh, topics
from .commands import (
    ActivateWorkspace,
    AddWorkspace,
    Close,
    Closest,
    Command,
    Focus,
    Focused,
    Index,
    Quit,
    RenameWorkspace,
    SetBorderColor,
    SetBorderWidth,
    SetFocusedBorderColor,
    Window,
    WindowSelector,
    WorkspaceSelector,
)
from .config import Config
from .ewmh import Atoms
from .inbox import EventReader, Inbox, Source
from .ipc import IPCServer
from .launcher import run_autostart
from .state import State, StateError
from .vector import Vector2D

ROOT_EVENT_MASK = (
    X.SubstructureNotifyMask
    | X.SubstructureRedirectMask
    | X.ButtonPressMask
    | X.ButtonReleaseMask
)

CLIENT_EVENT_MASK = X.SubstructureNotifyMask | X.SubstructureRedirectMask


class AnotherWindowManagerError(Exception):
    """Raised when the root window is already owned by another manager."""

    def __init__(self):
        super().__init__("Another window manager is running")


class WindowManager:
    """
    orbitwm Window Manager

    A floating, reparenting window manager for X11, remote-controlled over
    a Unix socket.
    """

    def __init__(self, config: Optional[Config] = None, display=None):
        """Initialize the window manager.

        Args:
            config: Configuration, defaults to Config()
            display: An open Xlib display. If None, one is opened in setup()
        """
        self.config = config or Config()
        self.display = display
        self.state = State()
        self.inbox = Inbox()
        self.ipc = IPCServer(self.inbox, self.config.socket_path)

        self.atoms: Optional[Atoms] = None
        self.root = None
        self.child = None
        self.running = False

        self.debug = bool(os.getenv("ORBITWM_DEBUG"))

        # Setup debug event logging if enabled
        if self.debug:
            pub.subscribe(self.debug_event_logger, pub.ALL_TOPICS)

        self._event_handlers = {
            X.ButtonPress: self._on_button_press,
            X.MotionNotify: self._on_motion_notify,
            X.ConfigureRequest: self._on_configure_request,
            X.MapRequest: self._on_map_request,
            X.DestroyNotify: self._on_destroy_notify,
            X.ClientMessage: self._on_client_message,
        }

        self._command_handlers = {
            Focus: self._on_focus,
            Close: self._on_close,
            AddWorkspace: self._on_add_workspace,
            RenameWorkspace: self._on_rename_workspace,
            ActivateWorkspace: self._on_activate_workspace,
            SetBorderWidth: self._on_set_border_width,
            SetBorderColor: self._on_set_border_color,
            SetFocusedBorderColor: self._on_set_focused_border_color,
        }

    def debug_event_logger(self, topic=pub.AUTO_TOPIC, **kwargs):
        """Log all events published on the event bus."""
        timestamp = time.strftime("%H:%M:%S")
        topic_name = topic.getName()
        data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items() if k != "topic")
        print(f"[{timestamp}] EVENT: {topic_name} | {data_str}")

    # Setup

    def setup(self):
        """Take over the display and start the input threads.

        Raises:
            AnotherWindowManagerError: If another window manager is running
            Xlib.error.XError: If any setup request fails
        """
        if self.display is None:
            # The reader thread and this one share the connection
            import Xlib.threaded  # noqa: F401
            from Xlib import display

            self.display = display.Display(self.config.display)

        screen = self.display.screen(self.config.screen)
        self.root = screen.root
        self.state.root = self.root.id

        self._become_window_manager()

        self.atoms = Atoms(self.display)
        ewmh.set_supported(self.atoms, self.root)

        # Invisible window holding the EWMH check and name properties
        self.child = self.root.create_window(
            0, 0, 1, 1, 0, X.CopyFromParent, X.InputOnly, X.CopyFromParent
        )
        self.state.child = self.child.id

        ewmh.set_wm_name(self.atoms, self.child, self.config.wm_name)
        ewmh.set_supporting_wm_check(self.atoms, self.root, self.child)
        ewmh.set_active_window(self.atoms, self.root, None)
        ewmh.set_current_desktop(self.atoms, self.root, self.state.active_workspace)
        self._refresh_desktops()

        self.display.flush()

        if self.config.autostart:
            run_autostart(self.config.autostart)

        EventReader(self.display, self.inbox).start()
        self.ipc.start()

    def _become_window_manager(self):
        """Select substructure redirection on the root window.

        Only one client may do this at a time, so the server answers
        BadAccess if another window manager already has.
        """
        ec = error.CatchError(error.BadAccess)
        self.root.change_attributes(event_mask=ROOT_EVENT_MASK, onerror=ec)
        self.display.sync()

        if ec.get_error():
            raise AnotherWindowManagerError()

    def _refresh_desktops(self):
        """Advertise the workspace list to pagers."""
        names = self.state.workspaces_names()
        ewmh.set_number_of_desktops(self.atoms, self.root, len(names))
        ewmh.set_desktop_names(self.atoms, self.root, names)

    # Serve

    def serve(self):
        """Apply inbox items in arrival order until Quit."""
        self.running = True
        while self.running:
            source, item = self.inbox.get()
            if source is Source.EVENT:
                self.handle_event(item)
            else:
                self.handle_command(item)
            self.display.flush()

    def run(self):
        """Run the window manager.

        Raises:
            AnotherWindowManagerError: If another window manager is running
            Xlib.error.XError: On any failed request outside the handlers' scope
        """
        self.setup()

        print("orbitwm started")
        print(f"  Display: {self.display.get_display_name()}")
        print(f"  Socket: {self.ipc.socket_path}")

        try:
            self.serve()
        finally:
            self.shutdown()

    def shutdown(self):
        """Remove the socket and close the display connection."""
        self.ipc.close()
        if self.display is not None:
            self.display.close()

    def handle_event(self, ev):
        """Apply one X event. Registry errors are logged, not raised."""
        handler = self._event_handlers.get(ev.type)
        if handler is None:
            if self.debug:
                print(f"WM: Unhandled event: {ev.__class__.__name__}")
            return

        try:
            handler(ev)
        except StateError as e:
            print(f"WM: {e}")

    def handle_command(self, command: Command):
        """Apply one remote command. Registry errors are logged, not raised."""
        pub.sendMessage(topics.COMMAND_RECEIVED, command=command)

        if isinstance(command, Quit):
            print("WM: Quitting")
            self.running = False
            return

        handler = self._command_handlers.get(type(command))
        if handler is None:
            print(f"WM: Unhandled command: {command!r}")
            return

        try:
            handler(command)
        except StateError as e:
            print(f"WM: {e}")

    # X event handlers

    def _window(self, window: int):
        return self.display.create_resource_object("window", window)

    def _is_dock(self, window) -> bool:
        types = ewmh.get_wm_window_type(self.atoms, window)
        return self.atoms.NET_WM_WINDOW_TYPE_DOCK in types

    def _on_button_press(self, ev):
        geometry = ev.window.get_geometry()

        self.state.drag_start_pos = Vector2D(ev.root_x, ev.root_y)
        self.state.drag_start_frame_pos = Vector2D(geometry.x, geometry.y)

        if ev.detail == self.config.select_button:
            self._focus(Window(ev.window.id))

    def _on_motion_notify(self, ev):
        if not ev.state & self.config.mod_mask:
            return

        mouse_pos = Vector2D(ev.root_x, ev.root_y)

        if ev.state & self.config.drag_button_mask:
            client = self.state.drag_client(ev.window.id, mouse_pos)
            ev.window.configure(x=client.pos.x, y=client.pos.y)
        elif ev.state & self.config.resize_button_mask:
            client = self.state.drag_resize_client(ev.window.id, mouse_pos)
            ev.window.configure(width=client.size.x, height=client.size.y)

    def _on_configure_request(self, ev):
        # Docks place themselves
        if self._is_dock(ev.window):
            return

        ev.window.configure(
            x=ev.x,
            y=ev.y,
            width=ev.width,
            height=ev.height,
            border_width=self.config.border_width,
            stack_mode=ev.stack_mode,
        )

    def _on_map_request(self, ev):
        window = ev.window
        window.map()

        if self._is_dock(window):
            return

        geometry = window.get_geometry()
        client = self.state.add_client(
            window.id,
            Vector2D(geometry.x, geometry.y),
            Vector2D(geometry.width, geometry.height),
        )

        window.configure(border_width=self.config.border_width)
        window.change_attributes(
            border_pixel=self.config.border_color, event_mask=CLIENT_EVENT_MASK
        )
        window.change_save_set(X.SetModeInsert)
        window.reparent(self.root, client.pos.x, client.pos.y)
        window.set_input_focus(X.RevertToPointerRoot, X.CurrentTime)

        self._grab_buttons(window)

        pub.sendMessage(
            topics.WINDOW_MANAGED,
            window=window.id,
            workspace=self.state.get_active_workspace().name,
        )

    def _grab_buttons(self, window):
        """Install the select, drag and resize grabs under the modifier."""
        window.grab_button(
            self.config.select_button,
            self.config.mod_mask,
            True,
            X.ButtonPressMask | X.ButtonReleaseMask,
            X.GrabModeAsync,
            X.GrabModeAsync,
            X.NONE,
            X.NONE,
        )
        self.display.allow_events(X.AsyncPointer, X.CurrentTime)

        for button in (self.config.drag_button, self.config.resize_button):
            window.grab_button(
                button,
                self.config.mod_mask,
                False,
                X.ButtonPressMask | X.ButtonReleaseMask | X.ButtonMotionMask,
                X.GrabModeAsync,
                X.GrabModeAsync,
                X.NONE,
                X.NONE,
            )

    def _on_destroy_notify(self, ev):
        was_focused = self.state.focused
        self.state.remove_window(ev.window.id)
        pub.sendMessage(topics.WINDOW_UNMANAGED, window=ev.window.id)

        if was_focused == ev.window.id:
            ewmh.set_active_window(self.atoms, self.root, None)
            pub.sendMessage(topics.FOCUS_CHANGED, window=None)

    def _on_client_message(self, ev):
        # Sent by pagers to switch desktop
        if ev.client_type != self.atoms.NET_CURRENT_DESKTOP:
            return

        _, data = ev.data
        self._activate_workspace(Index(data[0]))

    # Focus

    def _focus(self, selector: WindowSelector):
        previous = self.state.focused
        self.state.focus_client(selector)
        self._reflect_focus(previous)

    def _reflect_focus(self, previous: Optional[int]):
        """Push the registry's focus to the server.

        Args:
            previous: The window focused before the change
        """
        focused = self.state.focused

        if (
            previous is not None
            and previous != focused
            and previous in self.state.active_workspace_clients()
        ):
            self._window(previous).change_attributes(
                border_pixel=self.config.border_color
            )

        if focused is None:
            self.display.set_input_focus(
                X.PointerRoot, X.RevertToPointerRoot, X.CurrentTime
            )
        else:
            window = self._window(focused)
            window.change_attributes(border_pixel=self.config.focused_border_color)
            window.set_input_focus(X.RevertToPointerRoot, X.CurrentTime)
            window.configure(stack_mode=X.Above)

        ewmh.set_active_window(self.atoms, self.root, focused)
        pub.sendMessage(topics.FOCUS_CHANGED, window=focused)

    # Command handlers

    def _on_focus(self, command: Focus):
        selector = command.selector
        if not isinstance(selector, Closest):
            self._focus(selector)
            return

        previous = self.state.focused
        client = self.state.focus_closest_client(Focused(), selector.direction)
        if client is None:
            print(f"WM: No window to the {selector.direction.value}")
            return
        self._reflect_focus(previous)

    def _on_close(self, command: Close):
        # The client stays managed until its DestroyNotify; it may refuse
        client = self.state.select_client(command.selector)
        window = self._window(client.window)

        protocols = ewmh.get_wm_protocols(self.atoms, window)
        graceful = self.atoms.WM_DELETE_WINDOW in protocols
        if graceful:
            ewmh.send_close_request(self.display, self.atoms, window)
        else:
            window.kill_client()

        pub.sendMessage(
            topics.WINDOW_CLOSE_REQUESTED, window=client.window, graceful=graceful
        )

    def _on_add_workspace(self, command: AddWorkspace):
        workspace = self.state.add_workspace(command.name)
        self._refresh_desktops()

        names = self.state.workspaces_names()
        pub.sendMessage(
            topics.WORKSPACE_ADDED, name=workspace.name, index=names.index(workspace.name)
        )

    def _on_rename_workspace(self, command: RenameWorkspace):
        workspace = self.state.rename_workspace(command.selector, command.new_name)
        self._refresh_desktops()

        names = self.state.workspaces_names()
        pub.sendMessage(
            topics.WORKSPACE_RENAMED,
            name=workspace.name,
            index=names.index(workspace.name),
        )

    def _on_activate_workspace(self, command: ActivateWorkspace):
        self._activate_workspace(command.selector)

    def _activate_workspace(self, selector: WorkspaceSelector):
        """Switch the visible workspace.

        Old clients are unmapped before the index changes and new ones
        mapped after the desktop property is updated. Focus is dropped.
        """
        index = self.state.select_workspace(selector)
        if index == self.state.active_workspace:
            ewmh.set_current_desktop(self.atoms, self.root, index)
            return

        focused = self.state.focused
        for window in self.state.active_workspace_clients():
            w = self._window(window)
            if window == focused:
                w.change_attributes(border_pixel=self.config.border_color)
            w.unmap()

        self.state.activate_workspace(selector)
        ewmh.set_current_desktop(self.atoms, self.root, index)
        ewmh.set_active_window(self.atoms, self.root, None)

        for window in self.state.active_workspace_clients():
            self._window(window).map()

        pub.sendMessage(
            topics.WORKSPACE_SWITCHED,
            name=self.state.get_active_workspace().name,
            index=index,
        )

    def _on_set_border_width(self, command: SetBorderWidth):
        self.config.border_width = command.width
        for window in self.state.active_workspace_clients():
            self._window(window).configure(border_width=command.width)

        pub.sendMessage(topics.CONFIG_CHANGED, key="border_width", value=command.width)

    def _on_set_border_color(self, command: SetBorderColor):
        self.config.border_color = command.color
        for window in self.state.active_workspace_clients():
            if window == self.state.focused:
                continue
            self._window(window).change_attributes(border_pixel=command.color)

        pub.sendMessage(topics.CONFIG_CHANGED, key="border_color", value=command.color)

    def _on_set_focused_border_color(self, command: SetFocusedBorderColor):
        self.config.focused_border_color = command.color
        if self.state.focused is not None:
            self._window(self.state.focused).change_attributes(
                border_pixel=command.color
            )

        pub.sendMessage(
            topics.CONFIG_CHANGED, key="focused_border_color", value=command.color
        )
