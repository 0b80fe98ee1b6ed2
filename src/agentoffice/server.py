"""AgentOffice HTTP server."""

import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException  # type: ignore[import-untyped]
from fastapi.middleware.cors import CORSMiddleware  # type: ignore[import-untyped]

from .gateway_sync import GatewayLogSynchronizer
from .logging_manager import LoggingManager
from .monitoring.config import MonitoringConfig
from .simple_models import ServerConfig

logger = logging.getLogger(__name__)


class AgentOfficeServer:
    """Serves derived agent state to the browser visualization."""

    def __init__(
        self,
        config: ServerConfig,
        synchronizer: GatewayLogSynchronizer,
        logging_manager: LoggingManager | None = None,
    ):
        """Initialize the server.

        Args:
            config: Server configuration
            synchronizer: Gateway log synchronizer owning the agent state
            logging_manager: Logging manager whose JSON log backs /api/logs
        """
        self.config = config
        self.synchronizer = synchronizer
        self.logging_manager = logging_manager

        self.app = FastAPI(
            title="AgentOffice",
            description="Live agent activity derived from the gateway log",
            version="1.0.0",
            lifespan=self._lifespan,
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_routes()

        logger.info("AgentOffice server initialized")

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Run the gateway log sync for as long as the app is serving."""
        self.synchronizer.start()
        try:
            yield
        finally:
            await self.synchronizer.shutdown()

    def _setup_routes(self):
        """Setup FastAPI routes."""

        @self.app.get("/api/health")
        async def health_check():
            """Health check endpoint."""
            position = self.synchronizer.position()
            return {
                "status": "ok",
                "timestamp": datetime.now(UTC).isoformat(),
                "sync": {
                    "running": self.synchronizer.is_running(),
                    "log_path": position.file_path,
                    "byte_offset": position.byte_offset,
                    "last_read": position.last_read_timestamp,
                },
            }

        @self.app.get("/api/status")
        async def get_status():
            """Current activity of every registered agent."""
            return {"agents": self.synchronizer.get_agent_states()}

        @self.app.get("/api/stats")
        async def get_stats():
            """Productivity statistics for every registered agent."""
            return {"stats": self.synchronizer.get_agent_stats()}

        @self.app.get("/api/stats/{agent_id}")
        async def get_agent_stats(agent_id: str):
            """Productivity statistics for one agent."""
            stats = self.synchronizer.get_agent_stats_by_id(agent_id)
            if stats is None:
                raise HTTPException(status_code=404, detail=f"Unknown agent: {agent_id}")
            return stats

        @self.app.get("/api/logs")
        async def get_logs(limit: int = 100):
            """Recent entries from this server's own JSON log."""
            if self.logging_manager is None:
                raise HTTPException(status_code=503, detail="File logging not configured")
            return {"logs": self.logging_manager.get_recent_logs(limit)}

    async def start_server(self):
        """Start the HTTP server."""
        import uvicorn  # type: ignore[import-untyped]

        logger.info(
            f"Starting AgentOffice server on {self.config.server_host}:{self.config.server_port}"
        )

        config = uvicorn.Config(
            self.app,
            host=self.config.server_host,
            port=self.config.server_port,
            log_level=self.config.log_level.lower(),
        )
        server = uvicorn.Server(config)
        await server.serve()


async def main():
    """Main entry point for the server."""
    config = ServerConfig.from_env()
    monitoring_config = MonitoringConfig.from_env()
    if os.getenv("AGENTOFFICE_MAX_INACTIVE") is None:
        # The served dashboard defaults to a 1 minute inactivity timeout.
        monitoring_config.max_inactive_seconds = 60.0

    logging_manager = LoggingManager(log_dir=config.log_dir, log_level=config.log_level)
    synchronizer = GatewayLogSynchronizer(monitoring_config)

    server = AgentOfficeServer(config, synchronizer, logging_manager)
    await server.start_server()


def run():
    """Console entry point: run the server until interrupted."""
    try:
        asyncio.run(main())
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
