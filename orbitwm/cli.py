"""
Command Line Interface

`orbitwm start` runs the window manager; every other subcommand builds one
command and sends it to the running manager over the IPC socket.
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from Xlib import error

from . import __version__
from .commands import (
    U32_MAX,
    ActivateWorkspace,
    AddWorkspace,
    CardinalDirection,
    Close,
    Closest,
    Command,
    Cycle,
    CycleDirection,
    Focus,
    Focused,
    Index,
    Name,
    Quit,
    RenameWorkspace,
    SetBorderColor,
    SetBorderWidth,
    SetFocusedBorderColor,
    Window,
    WindowId,
    WindowSelector,
    WorkspaceSelector,
)
from .config import Config, parse_color
from .ipc import send_command


def _u32(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if not 0 <= value <= U32_MAX:
        raise argparse.ArgumentTypeError(f"out of range: {text!r}")
    return value


def _color(text: str) -> int:
    try:
        value = parse_color(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    if value > U32_MAX:
        raise argparse.ArgumentTypeError(f"out of range: {text!r}")
    return value


def _index(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an index: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"index must not be negative: {text!r}")
    return value


def _add_window_selector(parser: argparse.ArgumentParser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--focused", action="store_true", help="the focused window (default)"
    )
    group.add_argument("--window", type=_u32, metavar="ID", help="a window id")
    group.add_argument(
        "--closest",
        choices=[d.value.lower() for d in CardinalDirection],
        help="the closest window in a direction from the focused one",
    )
    group.add_argument(
        "--cycle",
        choices=[d.value.lower() for d in CycleDirection],
        help="the next or previous window of the workspace",
    )


def _add_workspace_selector(parser: argparse.ArgumentParser):
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--index", type=_index, help="a 0-based workspace index")
    group.add_argument("--name", help="a workspace name")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orbitwm", description="A remote-controlled X11 window manager"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--socket", metavar="PATH", help="IPC socket path (default: per display)"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    start = subparsers.add_parser("start", help="run the window manager")
    start.add_argument("--autostart", metavar="PATH", help="program to run at startup")
    start.add_argument("--display", help="X display to manage (default: $DISPLAY)")

    subparsers.add_parser("quit", help="stop the window manager")

    focus = subparsers.add_parser("focus", help="focus a window")
    _add_window_selector(focus)

    close = subparsers.add_parser("close", help="close a window")
    _add_window_selector(close)

    add = subparsers.add_parser("add-workspace", help="append a workspace")
    add.add_argument("--name", help="workspace name (default: its ordinal)")

    rename = subparsers.add_parser("rename-workspace", help="rename a workspace")
    _add_workspace_selector(rename)
    rename.add_argument("new_name")

    activate = subparsers.add_parser("activate-workspace", help="switch workspace")
    _add_workspace_selector(activate)

    config = subparsers.add_parser("config", help="change border settings")
    settings = config.add_subparsers(dest="setting", metavar="SETTING")
    settings.required = True

    width = settings.add_parser("border-width", help="border width in pixels")
    width.add_argument("width", type=_u32)

    color = settings.add_parser("border-color", help="unfocused border color")
    color.add_argument("color", type=_color)

    focused = settings.add_parser("focused-border-color", help="focused border color")
    focused.add_argument("color", type=_color)

    return parser


def window_selector_from_args(args: argparse.Namespace) -> WindowSelector:
    if args.window is not None:
        return Window(WindowId(args.window))
    if args.closest:
        return Closest(CardinalDirection(args.closest.capitalize()))
    if args.cycle:
        return Cycle(CycleDirection(args.cycle.capitalize()))
    return Focused()


def workspace_selector_from_args(args: argparse.Namespace) -> WorkspaceSelector:
    if args.index is not None:
        return Index(args.index)
    return Name(args.name)


def args_to_command(args: argparse.Namespace) -> Optional[Command]:
    """Translate parsed arguments into a command.

    Returns:
        The command to send, or None for `start`
    """
    if args.command == "start":
        return None
    if args.command == "quit":
        return Quit()
    if args.command == "focus":
        return Focus(window_selector_from_args(args))
    if args.command == "close":
        return Close(window_selector_from_args(args))
    if args.command == "add-workspace":
        return AddWorkspace(args.name)
    if args.command == "rename-workspace":
        return RenameWorkspace(workspace_selector_from_args(args), args.new_name)
    if args.command == "activate-workspace":
        return ActivateWorkspace(workspace_selector_from_args(args))

    if args.setting == "border-width":
        return SetBorderWidth(args.width)
    if args.setting == "border-color":
        return SetBorderColor(args.color)
    return SetFocusedBorderColor(args.color)


def start(args: argparse.Namespace) -> int:
    """Run the window manager until Quit."""
    from .window_manager import AnotherWindowManagerError, WindowManager

    options = dict(display=args.display, autostart=args.autostart)
    if args.socket:
        options["socket_path"] = args.socket
    config = Config(**options)

    try:
        WindowManager(config).run()
    except AnotherWindowManagerError as e:
        print(f"orbitwm: {e}", file=sys.stderr)
        return 1
    except (error.DisplayError, error.XError) as e:
        print(f"orbitwm: X error: {e}", file=sys.stderr)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    command = args_to_command(args)
    if command is None:
        return start(args)

    try:
        send_command(command, args.socket)
    except OSError as e:
        print(f"orbitwm: cannot send command ({e}), is orbitwm running?", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
