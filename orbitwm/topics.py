"""
Notification Topics for orbitwm

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

The dispatch loop publishes these after it has applied a change to the
registry and reflected it to the X server. Subscribers are optional; setting
ORBITWM_DEBUG subscribes a logger to every topic.
"""

# Window lifecycle events
WINDOW_MANAGED = "window.managed"
"""Published when a mapped window becomes a client. Params: window, workspace"""

WINDOW_UNMANAGED = "window.unmanaged"
"""Published when a client is dropped from the registry. Params: window"""

WINDOW_CLOSE_REQUESTED = "window.close_requested"
"""Published when a client is asked (or forced) to close. Params: window, graceful"""

# Focus state notifications
FOCUS_CHANGED = "focus.changed"
"""Published when window focus changes. Params: window (or None)"""

# Workspace events
WORKSPACE_ADDED = "workspace.added"
"""Published when a workspace is appended. Params: name, index"""

WORKSPACE_RENAMED = "workspace.renamed"
"""Published when a workspace is renamed. Params: name, index"""

WORKSPACE_SWITCHED = "workspace.switched"
"""Published when switching between workspaces. Params: name, index"""

# Configuration events
CONFIG_CHANGED = "config.changed"
"""Published when a border setting changes. Params: key, value"""

# Remote commands
COMMAND_RECEIVED = "command.received"
"""Published when the dispatch loop takes a command off the inbox. Params: command"""
