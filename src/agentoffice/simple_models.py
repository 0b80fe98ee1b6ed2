"""Server configuration for AgentOffice."""

import os


class ServerConfig:
    """Configuration for the AgentOffice HTTP server."""

    def __init__(
        self,
        server_host: str = "localhost",
        server_port: int = 3004,
        log_dir: str = "/tmp/agentoffice_logs",
        log_level: str = "INFO",
    ):
        self.server_host = server_host
        self.server_port = server_port
        self.log_dir = log_dir
        self.log_level = log_level

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load server settings from the environment.

        Raises:
            ValueError: If AGENTOFFICE_PORT is not an integer
        """
        port = os.getenv("AGENTOFFICE_PORT", "3004")
        try:
            server_port = int(port)
        except ValueError as e:
            raise ValueError(f"AGENTOFFICE_PORT must be an integer, got {port!r}") from e

        return cls(
            server_host=os.getenv("AGENTOFFICE_HOST", "localhost"),
            server_port=server_port,
            log_dir=os.getenv("AGENTOFFICE_LOG_DIR", "/tmp/agentoffice_logs"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
