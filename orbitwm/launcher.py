"""
Application Launcher

Spawns the autostart program once the window manager owns the display.
"""

from __future__ import annotations
import os
import shlex
import subprocess
from typing import Optional


def spawn(command: str) -> Optional[subprocess.Popen]:
    """Spawn a program in its own session.

    Failure is reported but never fatal to the window manager.

    Args:
        command: Shell command to execute

    Returns:
        The child process, or None if it could not be started
    """
    try:
        env = os.environ.copy()
        return subprocess.Popen(
            command,
            shell=True,
            start_new_session=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            env=env,
        )
    except OSError as e:
        print(f"Failed to spawn {command}: {e}")
        return None


def run_autostart(path: str) -> Optional[subprocess.Popen]:
    """Run the autostart program, if it exists."""
    path = os.path.expanduser(path)
    if not os.path.isfile(path):
        print(f"WM: Autostart program not found: {path}")
        return None

    print(f"WM: Running autostart {path}")
    return spawn(shlex.quote(path))
