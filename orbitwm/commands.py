"""
Command Model and Wire Codec

A command represents the intent of the user to change the state of the
window manager. Commands are immutable and are the only thing that crosses
the process boundary between the client CLI and the running manager.

Wire format: JSON, externally tagged.
- Unit variants are bare strings: "Quit", "Focused"
- Newtype variants are single-key objects: {"Window": 42}, {"Closest": "East"}
- Struct variants hold a field object: {"Focus": {"selector": "Focused"}}
"""

from __future__ import annotations
import json
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, NewType, Optional, Union

# X resource ids are 32-bit. Whether an id denotes a live window is only
# known when it is looked up in the registry.
WindowId = NewType("WindowId", int)

U32_MAX = 0xFFFFFFFF


class CommandDecodeError(ValueError):
    """Raised when a payload does not decode to a valid Command."""


class CardinalDirection(Enum):
    """Direction used by the closest-window selector."""

    EAST = "East"
    WEST = "West"
    NORTH = "North"
    SOUTH = "South"


class CycleDirection(Enum):
    """Direction used by the cycle selector."""

    NEXT = "Next"
    PREV = "Prev"


# Window selectors


@dataclass(frozen=True)
class Focused:
    """The currently focused window."""


@dataclass(frozen=True)
class Window:
    """An explicit window id."""

    window: WindowId


@dataclass(frozen=True)
class Closest:
    """The closest window to the focused one in a cardinal direction."""

    direction: CardinalDirection


@dataclass(frozen=True)
class Cycle:
    """The next or previous window in workspace order."""

    direction: CycleDirection


WindowSelector = Union[Focused, Window, Closest, Cycle]


# Workspace selectors


@dataclass(frozen=True)
class Index:
    """A workspace by its 0-based position."""

    index: int


@dataclass(frozen=True)
class Name:
    """A workspace by name."""

    name: str


WorkspaceSelector = Union[Index, Name]


# Commands


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Focus:
    selector: WindowSelector


@dataclass(frozen=True)
class Close:
    selector: WindowSelector


@dataclass(frozen=True)
class AddWorkspace:
    name: Optional[str] = None


@dataclass(frozen=True)
class RenameWorkspace:
    selector: WorkspaceSelector
    new_name: str


@dataclass(frozen=True)
class ActivateWorkspace:
    selector: WorkspaceSelector


@dataclass(frozen=True)
class SetBorderWidth:
    width: int


@dataclass(frozen=True)
class SetBorderColor:
    color: int


@dataclass(frozen=True)
class SetFocusedBorderColor:
    color: int


Command = Union[
    Quit,
    Focus,
    Close,
    AddWorkspace,
    RenameWorkspace,
    ActivateWorkspace,
    SetBorderWidth,
    SetBorderColor,
    SetFocusedBorderColor,
]


# Encoding


def _value_to_wire(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Focused, Window, Closest, Cycle, Index, Name)):
        return _variant_to_wire(value)
    return value


def _variant_to_wire(variant: Any) -> Any:
    """Encode a selector (unit or newtype variant)."""
    tag = type(variant).__name__
    variant_fields = fields(variant)
    if not variant_fields:
        return tag
    return {tag: _value_to_wire(getattr(variant, variant_fields[0].name))}


def command_to_wire(command: Command) -> Any:
    """Convert a command into its JSON-compatible tagged form."""
    tag = type(command).__name__
    command_fields = fields(command)
    if not command_fields:
        return tag
    return {
        tag: {f.name: _value_to_wire(getattr(command, f.name)) for f in command_fields}
    }


def encode_command(command: Command) -> bytes:
    """Serialize a command for the IPC socket."""
    return json.dumps(command_to_wire(command)).encode("utf-8")


# Decoding


def _split_tag(data: Any, what: str):
    """Return (tag, payload) for an externally tagged value."""
    if isinstance(data, str):
        return data, None
    if isinstance(data, dict) and len(data) == 1:
        ((tag, payload),) = data.items()
        return tag, payload
    raise CommandDecodeError(f"Invalid {what}: {data!r}")


def _u32(value: Any, what: str) -> int:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, int):
        raise CommandDecodeError(f"{what} must be an integer, got {value!r}")
    if not 0 <= value <= U32_MAX:
        raise CommandDecodeError(f"{what} out of range: {value}")
    return value


def _usize(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CommandDecodeError(f"{what} must be a non-negative integer, got {value!r}")
    return value


def _string(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise CommandDecodeError(f"{what} must be a string, got {value!r}")
    return value


def _optional_string(value: Any, what: str) -> Optional[str]:
    if value is None:
        return None
    return _string(value, what)


def _enum(enum_cls, value: Any, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise CommandDecodeError(f"Unknown {what}: {value!r}") from None


def window_selector_from_wire(data: Any) -> WindowSelector:
    tag, payload = _split_tag(data, "window selector")
    if tag == "Focused" and payload is None:
        return Focused()
    if tag == "Window":
        return Window(WindowId(_u32(payload, "window")))
    if tag == "Closest":
        return Closest(_enum(CardinalDirection, payload, "cardinal direction"))
    if tag == "Cycle":
        return Cycle(_enum(CycleDirection, payload, "cycle direction"))
    raise CommandDecodeError(f"Unknown window selector: {data!r}")


def workspace_selector_from_wire(data: Any) -> WorkspaceSelector:
    tag, payload = _split_tag(data, "workspace selector")
    if tag == "Index":
        return Index(_usize(payload, "index"))
    if tag == "Name":
        return Name(_string(payload, "name"))
    raise CommandDecodeError(f"Unknown workspace selector: {data!r}")


# tag -> (command class, {field name: field decoder})
_COMMANDS: Dict[str, tuple] = {
    "Quit": (Quit, {}),
    "Focus": (Focus, {"selector": window_selector_from_wire}),
    "Close": (Close, {"selector": window_selector_from_wire}),
    "AddWorkspace": (
        AddWorkspace,
        {"name": lambda v: _optional_string(v, "name")},
    ),
    "RenameWorkspace": (
        RenameWorkspace,
        {
            "selector": workspace_selector_from_wire,
            "new_name": lambda v: _string(v, "new_name"),
        },
    ),
    "ActivateWorkspace": (
        ActivateWorkspace,
        {"selector": workspace_selector_from_wire},
    ),
    "SetBorderWidth": (SetBorderWidth, {"width": lambda v: _u32(v, "width")}),
    "SetBorderColor": (SetBorderColor, {"color": lambda v: _u32(v, "color")}),
    "SetFocusedBorderColor": (
        SetFocusedBorderColor,
        {"color": lambda v: _u32(v, "color")},
    ),
}


def command_from_wire(data: Any) -> Command:
    """Build a command from its JSON-compatible tagged form."""
    tag, payload = _split_tag(data, "command")
    if tag not in _COMMANDS:
        raise CommandDecodeError(f"Unknown command: {tag!r}")

    cls, decoders = _COMMANDS[tag]
    if not decoders:
        if payload is not None:
            raise CommandDecodeError(f"{tag} takes no fields")
        return cls()

    if not isinstance(payload, dict):
        raise CommandDecodeError(f"{tag} expects a field object, got {payload!r}")

    kwargs = {}
    for name, decode in decoders.items():
        # AddWorkspace.name is optional and may be omitted entirely
        if name not in payload and not (cls is AddWorkspace and name == "name"):
            raise CommandDecodeError(f"{tag} is missing field {name!r}")
        kwargs[name] = decode(payload.get(name))

    unknown = set(payload) - set(decoders)
    if unknown:
        raise CommandDecodeError(f"{tag} has unknown fields: {sorted(unknown)}")

    return cls(**kwargs)


def decode_command(data: Union[bytes, str]) -> Command:
    """Deserialize a command received on the IPC socket."""
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        parsed = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise CommandDecodeError(f"Malformed payload: {e}") from e
    return command_from_wire(parsed)

