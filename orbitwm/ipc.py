"""
IPC Server for orbitwm

Remote control over a Unix domain socket. Every connection carries exactly
one JSON-encoded command; the end of the stream delimits it. No reply is
ever written back.

Wire format: see orbitwm.commands
"""

from __future__ import annotations
import socket
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from .commands import CommandDecodeError, decode_command, encode_command
from .config import default_socket_path

if TYPE_CHECKING:
    from .commands import Command
    from .inbox import Inbox

RECV_SIZE = 4096


class IPCServer:
    """
    Command socket for orbitwm.

    A listener thread accepts connections and hands each one to a
    short-lived worker thread, which reads the payload to EOF, decodes it
    and pushes the command into the inbox.
    """

    def __init__(self, inbox: "Inbox", socket_path: Optional[Path] = None):
        """Initialize the IPC server.

        Args:
            inbox: Where decoded commands are delivered
            socket_path: Socket to listen on, defaults to default_socket_path()
        """
        self.inbox = inbox
        self.socket_path = Path(socket_path) if socket_path else default_socket_path()
        self.server_socket: Optional[socket.socket] = None
        self.listener: Optional[threading.Thread] = None
        self._closed = False

    def start(self):
        """Bind the socket and start the listener thread."""
        # Remove existing socket if present
        if self.socket_path.exists() or self.socket_path.is_symlink():
            self.socket_path.unlink()

        self.server_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.server_socket.bind(str(self.socket_path))
        self.server_socket.listen(10)

        self.listener = threading.Thread(
            target=self._listen, name="orbitwm-ipc", daemon=True
        )
        self.listener.start()

        print(f"IPC server listening on {self.socket_path}")

    def _listen(self):
        """Accept connections until the server is closed."""
        while True:
            try:
                client, _ = self.server_socket.accept()
            except OSError as e:
                if self._closed:
                    return
                print(f"IPC: Error accepting client: {e}")
                continue

            worker = threading.Thread(
                target=self._handle_client, args=(client,), daemon=True
            )
            worker.start()

    def _handle_client(self, client: socket.socket):
        """Read one command from a connection and forward it.

        Args:
            client: Client socket
        """
        with client:
            try:
                payload = self._read_all(client)
            except OSError as e:
                print(f"IPC: Error reading from client: {e}")
                return

        try:
            command = decode_command(payload)
        except CommandDecodeError as e:
            print(f"IPC: Dropping malformed command: {e}")
            return

        self.inbox.put_command(command)

    @staticmethod
    def _read_all(client: socket.socket) -> bytes:
        chunks = []
        while True:
            data = client.recv(RECV_SIZE)
            if not data:
                break
            chunks.append(data)
        return b"".join(chunks)

    def close(self):
        """Stop listening and remove the socket file."""
        self._closed = True
        if self.server_socket:
            try:
                # Wakes the listener blocked in accept() on Linux
                self.server_socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self.server_socket.close()
            self.server_socket = None

        if self.socket_path.exists():
            self.socket_path.unlink()


def send_command(command: "Command", socket_path: Optional[Union[str, Path]] = None):
    """Send one command to a running window manager.

    Fire-and-forget: nothing is read back, so whether the command applied
    cleanly cannot be observed here.

    Raises:
        OSError: If the socket cannot be reached
    """
    path = Path(socket_path) if socket_path else default_socket_path()

    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.connect(str(path))
        sock.sendall(encode_command(command))
