"""
Connection factory implementation
"""
import socket
from typing import Dict, Any

import paramiko

from ...core.interfaces import ConnectionFactory
from ...core.client import RemoteClient
from ...core.constants import DEFAULT_SSH_PORT, DEFAULT_SSH_TIMEOUT
from ...core.exceptions import ConnectionError


class RemoteConnectionFactory(ConnectionFactory):
    """RemoteClient connection factory"""
    
    def create(self, params: Dict[str, Any]) -> RemoteClient:
        """
        Create and connect SSH client.
        
        Args:
            params: Connection parameters dictionary
        
        Returns:
            Connected RemoteClient instance
        
        Raises:
            ConnectionError: If connection fails
        """
        auth_method = "key" if params.get("key") else "password"
        
        client = RemoteClient(
            host=params["host"],
            user=params["user"],
            port=params.get("port", DEFAULT_SSH_PORT),
            auth_method=auth_method,
            password=params.get("password"),
            key_path=params.get("key"),
            timeout=params.get("timeout", DEFAULT_SSH_TIMEOUT),
        )
        
        try:
            client.connect()
            return client
        except (paramiko.SSHException, socket.error) as e:
            client.close()
            raise ConnectionError(
                f"Failed to connect to {params['user']}@{params['host']}: {e}"
            ) from e
