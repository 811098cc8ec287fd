from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal, Sequence, Tuple
import shlex
import socket
import threading
import paramiko
from pathlib import Path

from .constants import DEFAULT_SSH_PORT, DEFAULT_SSH_TIMEOUT
from .exceptions import ConnectionError, RemoteCommandError
from .interfaces import RemoteSession
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class ClientConfig:
    host: str
    user: str
    port: int = DEFAULT_SSH_PORT
    auth_method: Literal["password", "key"] = "password"
    password: Optional[str] = None
    key_path: Optional[str] = None
    timeout: int = DEFAULT_SSH_TIMEOUT


class RemoteClient(RemoteSession):
    """
    Paramiko SSHClient wrapper:
    - keeps host / user / port explicitly (paramiko does not)
    - password and key authentication
    - loads Ed25519 / RSA private keys
    - exec / sftp helpers, commands fail loudly on non-zero exit
    - context manager support
    """
    def __init__(
        self,
        host: str,
        user: str,
        port: int = DEFAULT_SSH_PORT,
        auth_method: Literal["password", "key"] = "password",
        password: Optional[str] = None,
        key_path: Optional[str] = None,
        timeout: int = DEFAULT_SSH_TIMEOUT,
    ) -> None:
        self.config = ClientConfig(
            host=host,
            user=user,
            port=port,
            auth_method=auth_method,
            password=password,
            key_path=key_path,
            timeout=timeout,
        )

        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        
        # SFTP channel cache, shared by writer threads
        self._sftp: Optional[paramiko.SFTPClient] = None
        self._sftp_lock = threading.Lock()

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        cfg = self.config

        if cfg.auth_method == "password":
            self.client.connect(
                hostname=cfg.host,
                port=cfg.port,
                username=cfg.user,
                password=cfg.password,
                timeout=cfg.timeout,
                allow_agent=False,
                look_for_keys=False,
            )

        elif cfg.auth_method == "key":
            key = self._load_private_key(cfg.key_path)
            self.client.connect(
                hostname=cfg.host,
                port=cfg.port,
                username=cfg.user,
                pkey=key,
                timeout=cfg.timeout,
            )

        else:
            raise ValueError(f"Unsupported auth method: {cfg.auth_method}")

    # --------------------
    # Load private key
    # --------------------
    def _load_private_key(self, path: str) -> paramiko.PKey:
        """Try Ed25519 first, then RSA"""
        p = Path(path).expanduser()

        try:
            return paramiko.Ed25519Key.from_private_key_file(str(p))
        except (paramiko.SSHException, OSError):
            try:
                return paramiko.RSAKey.from_private_key_file(str(p))
            except (paramiko.SSHException, OSError) as e:
                raise ConnectionError(f"Failed to load private key at {p}") from e

    # --------------------
    # Helpers
    # --------------------
    def exec_with_code(self, cmd: str) -> Tuple[str, str, int]:
        """Run command and return (stdout, stderr, exit_code)"""
        try:
            stdin, stdout, stderr = self.client.exec_command(cmd, timeout=self.config.timeout)
            out = stdout.read().decode()
            err = stderr.read().decode()
            exit_code = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, socket.error) as e:
            raise ConnectionError(
                f"Lost connection to {self.config.host}:{self.config.port}: {e}"
            ) from e
        return out, err, exit_code

    def exec(self, cmd: str) -> Tuple[str, str]:
        """Run command and return (stdout, stderr)"""
        out, err, _ = self.exec_with_code(cmd)
        return out, err

    def execute(self, command: str) -> str:
        out, err, code = self.exec_with_code(command)
        if code != 0:
            raise RemoteCommandError(command, exit_code=code, stderr=err)
        return out

    def run_command(self, argv: Sequence[str]) -> str:
        return self.execute(shlex.join(argv))

    def open_sftp(self) -> paramiko.SFTPClient:
        """Return SFTP client, reusing the cached channel"""
        with self._sftp_lock:
            if self._sftp is None or self._sftp.get_channel() is None:
                try:
                    self._sftp = self.client.open_sftp()
                except (paramiko.SSHException, socket.error) as e:
                    raise ConnectionError(f"Failed to open SFTP channel: {e}") from e
            return self._sftp

    def close(self) -> None:
        if self._sftp:
            try:
                self._sftp.close()
            except (paramiko.SSHException, OSError) as e:
                logger.debug(f"Ignoring error while closing SFTP channel: {e}")
            self._sftp = None
        self.client.close()

    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> RemoteClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
