"""
Window Manager Configuration

Owned by the WindowManager and mutated only by the SetBorder* commands.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from Xlib import X


def parse_color(color: Union[str, int]) -> int:
    """
    Parse a color value into a 24-bit RGB pixel value.

    Accepts:
    - Integer: used as is (e.g., 0x5294e2)
    - Hex string: "#RRGGBB" or "0xRRGGBB" (e.g., "#4c4c4c")
    - Decimal string: "13421772"

    Returns:
    - Pixel value between 0 and 0xFFFFFFFF
    """
    if isinstance(color, bool):
        raise ValueError(f"Invalid color type: {type(color)}. Use hex string or int")

    if isinstance(color, int):
        value = color
    elif isinstance(color, str):
        text = color.strip()
        try:
            if text.startswith("#"):
                if len(text) != 7:
                    raise ValueError
                value = int(text[1:], 16)
            elif text.lower().startswith("0x"):
                value = int(text, 16)
            else:
                value = int(text, 10)
        except ValueError:
            raise ValueError(
                f"Invalid color format: {color}. Use #RRGGBB, 0xRRGGBB or an integer"
            ) from None
    else:
        raise ValueError(f"Invalid color type: {type(color)}. Use hex string or int")

    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"Color out of range: {color}")
    return value


def default_socket_path(display: Optional[str] = None) -> Path:
    """Get the Unix socket path for IPC.

    Args:
        display: X display name, defaults to $DISPLAY

    Returns:
        $ORBITWM_SOCKET if set, else a per-display socket in the runtime dir
    """
    override = os.getenv("ORBITWM_SOCKET")
    if override:
        return Path(override)

    runtime_dir = os.getenv("XDG_RUNTIME_DIR", "/tmp")
    display = (display or os.getenv("DISPLAY", ":0")).replace("/", "_")
    return Path(runtime_dir) / f"orbitwm-{display}.sock"


@dataclass
class Config:
    """Window manager configuration."""

    # Borders
    border_width: int = 2
    border_color: int = 0xCCCCCC
    focused_border_color: int = 0x00CCFF

    # Pointer gestures, all under the same modifier
    mod_mask: int = X.Mod4Mask
    select_button: int = X.Button1
    drag_button: int = X.Button1
    drag_button_mask: int = X.Button1MotionMask
    resize_button: int = X.Button3
    resize_button_mask: int = X.Button3MotionMask

    # Display and IPC
    display: Optional[str] = None
    screen: Optional[int] = None
    # Defaults to the socket of the managed display
    socket_path: Optional[Path] = None

    # Name advertised through _NET_WM_NAME
    wm_name: str = "orbitwm"

    # Program run once after setup
    autostart: Optional[str] = None

    def __post_init__(self):
        """Parse color strings into pixel values and resolve the socket path."""
        self.border_color = parse_color(self.border_color)
        self.focused_border_color = parse_color(self.focused_border_color)
        if self.socket_path is None:
            self.socket_path = default_socket_path(self.display)
        else:
            self.socket_path = Path(self.socket_path)
