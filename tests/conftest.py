"""Shared fixtures: an in-memory remote host standing in for the SSH session."""

import shlex
import threading
from typing import Dict, List, Optional, Sequence

import paramiko
import pytest

from proxysync.core.exceptions import RemoteCommandError
from proxysync.core.interfaces import ConnectionFactory, RemoteSession
from proxysync.domain.sync import SyncConfig, fingerprint
from proxysync.domain.topology import Node, RoutingConstraint, Service, Topology


RELOAD_COMMAND = "systemctl reload haproxy"


class _FakeSftpFile:
    def __init__(self, host: "FakeRemoteHost", path: str):
        self.host = host
        self.path = path
        self.buffer = b""

    def write(self, data):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.buffer += data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            self.host.store(self.path, self.buffer)


class _FakeSftp:
    def __init__(self, host: "FakeRemoteHost"):
        self.host = host

    def open(self, path: str, mode: str = "r"):
        if self.host.drop_sftp:
            raise paramiko.SSHException("Server connection dropped")
        if self.host.fail_writes:
            raise IOError(f"Permission denied: {path}")
        return _FakeSftpFile(self.host, path)


class FakeRemoteHost(RemoteSession):
    """
    Interprets the handful of commands the synchronizer issues:
    mkdir -p, find, sha256sum, the head -c here-document write and the
    reload command.
    """

    def __init__(self, reload_command: str = RELOAD_COMMAND):
        self.reload_command = reload_command
        self.files: Dict[str, bytes] = {}
        self.dirs = set()
        self.commands: List[str] = []
        self.writes: List[str] = []
        self.reloads = 0
        self.closed = False
        self.fail_writes = False
        self.fail_reload = False
        self.drop_sftp = False
        self.failing_paths = set()
        self._lock = threading.Lock()

    # helpers used by tests
    def store(self, path: str, data: bytes) -> None:
        with self._lock:
            self.files[path] = data
            self.writes.append(path)

    def read(self, path: str) -> str:
        return self.files[path].decode("utf-8")

    def hash_calls(self) -> List[str]:
        return [c for c in self.commands if c.startswith("sha256sum")]

    # RemoteSession
    def run_command(self, argv: Sequence[str]) -> str:
        with self._lock:
            self.commands.append(shlex.join(argv))
        name, args = argv[0], list(argv[1:])

        if name == "mkdir":
            self.dirs.add(args[-1])
            return ""
        if name == "find":
            root = args[0]
            prefix = root if root.endswith("/") else root + "/"
            entries = [root] + sorted(p for p in self.files if p.startswith(prefix))
            return "\n".join(entries) + "\n"
        if name == "sha256sum":
            path = args[0]
            if path in self.failing_paths or path not in self.files:
                raise RemoteCommandError(shlex.join(argv), exit_code=1, stderr="No such file")
            return f"{fingerprint(self.files[path])}  {path}\n"
        raise RemoteCommandError(shlex.join(argv), exit_code=127, stderr="command not found")

    def execute(self, command: str) -> str:
        with self._lock:
            self.commands.append(command)

        if command == self.reload_command:
            if self.fail_reload:
                raise RemoteCommandError(command, exit_code=1, stderr="reload failed")
            self.reloads += 1
            return ""

        if command.startswith("head -c "):
            if self.fail_writes:
                raise RemoteCommandError(command, exit_code=1, stderr="Permission denied")
            header, body = command.split("\n", 1)
            parts = shlex.split(header)
            size, path = int(parts[2]), parts[4]
            self.store(path, body.encode("utf-8")[:size])
            return ""

        raise RemoteCommandError(command, exit_code=127, stderr="command not found")

    def open_sftp(self):
        return _FakeSftp(self)

    def close(self) -> None:
        self.closed = True


class FakeConnectionFactory(ConnectionFactory):
    def __init__(self, host: Optional[FakeRemoteHost] = None, error: Optional[Exception] = None):
        self.host = host or FakeRemoteHost()
        self.error = error
        self.created = 0

    def create(self, params):
        self.created += 1
        if self.error is not None:
            raise self.error
        return self.host


def make_config(**overrides) -> SyncConfig:
    values = dict(
        host="proxy.internal",
        user="deploy",
        password="secret",
        remote_dir="/etc/haproxy/conf.d/",
        http_port=80,
        reload_command=RELOAD_COMMAND,
    )
    values.update(overrides)
    return SyncConfig(**values)


def make_api_topology(node: str = "10.0.0.5") -> Topology:
    return Topology(services=[
        Service(
            name="api",
            ports={"http": 8080},
            routes=[RoutingConstraint(order=0, port="http", domains=["api.example.com"])],
            nodes=[Node(ip=node)],
        )
    ])


@pytest.fixture
def remote_host() -> FakeRemoteHost:
    return FakeRemoteHost()


@pytest.fixture
def config() -> SyncConfig:
    return make_config()


@pytest.fixture
def api_topology() -> Topology:
    return make_api_topology()
