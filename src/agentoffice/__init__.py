"""AgentOffice: live agent activity derived from the gateway log."""

from .gateway_sync import GatewayLogSynchronizer
from .logging_manager import LoggingManager
from .monitoring import MonitoringConfig
from .simple_models import ServerConfig

__all__ = [
    "GatewayLogSynchronizer",
    "LoggingManager",
    "MonitoringConfig",
    "ServerConfig",
]

__version__ = "1.0.0"
