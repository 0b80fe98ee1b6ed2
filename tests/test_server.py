"""Tests for the AgentOffice HTTP server."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from agentoffice.gateway_sync import GatewayLogSynchronizer
from agentoffice.logging_manager import LoggingManager
from agentoffice.monitoring.config import MonitoringConfig
from agentoffice.server import AgentOfficeServer
from agentoffice.simple_models import ServerConfig


@pytest.fixture
def gateway_log(tmp_path: Path) -> Path:
    log_file = tmp_path / "gateway.log"
    log_file.write_text("")
    return log_file


@pytest.fixture
def synchronizer(gateway_log: Path) -> GatewayLogSynchronizer:
    # Long interval so the background loop stays idle; tests call poll_once.
    return GatewayLogSynchronizer(
        MonitoringConfig(log_path=str(gateway_log), poll_interval_seconds=60)
    )


@pytest.fixture
def server(synchronizer: GatewayLogSynchronizer) -> AgentOfficeServer:
    return AgentOfficeServer(ServerConfig(), synchronizer)


@pytest.fixture
def test_client(server: AgentOfficeServer):
    """FastAPI test client with the app lifespan running."""
    with TestClient(server.app) as client:
        yield client


class TestServerInitialization:
    """Test server initialization."""

    def test_server_init(self, server: AgentOfficeServer, synchronizer: GatewayLogSynchronizer):
        assert server.app is not None
        assert server.synchronizer is synchronizer
        assert server.logging_manager is None

    def test_lifespan_starts_and_stops_sync(
        self, server: AgentOfficeServer, synchronizer: GatewayLogSynchronizer
    ):
        with TestClient(server.app):
            assert synchronizer.is_running()
        assert not synchronizer.is_running()


class TestStatusEndpoints:
    """Test agent state endpoints."""

    def test_health(self, test_client: TestClient, gateway_log: Path):
        response = test_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "timestamp" in data
        assert data["sync"]["running"] is True
        assert data["sync"]["log_path"] == str(gateway_log)

    def test_status_lists_all_agents(
        self, test_client: TestClient, synchronizer: GatewayLogSynchronizer
    ):
        response = test_client.get("/api/status")

        assert response.status_code == 200
        agents = response.json()["agents"]
        assert [a["id"] for a in agents] == synchronizer.registry.ids
        for agent in agents:
            assert set(agent) == {"id", "name", "state", "currentTask", "lastActive"}
            assert agent["state"] == "idle"

    def test_status_reflects_log(
        self,
        test_client: TestClient,
        synchronizer: GatewayLogSynchronizer,
        gateway_log: Path,
    ):
        gateway_log.write_text("lane enqueue: lane=session:agent:nova:cron:abc queueSize=1\n")
        synchronizer.poll_once()

        agents = test_client.get("/api/status").json()["agents"]
        nova = next(a for a in agents if a["id"] == "nova")
        assert nova["state"] == "working"
        assert nova["currentTask"] == "cron"


class TestStatsEndpoints:
    """Test statistics endpoints."""

    def test_all_stats(self, test_client: TestClient, synchronizer: GatewayLogSynchronizer):
        response = test_client.get("/api/stats")

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert len(stats) == len(synchronizer.registry)

    def test_stats_by_id(
        self,
        test_client: TestClient,
        synchronizer: GatewayLogSynchronizer,
        gateway_log: Path,
    ):
        gateway_log.write_text("lane task done: lane=session:agent:delta:cron:x durationMs=1\n")
        synchronizer.poll_once()

        response = test_client.get("/api/stats/delta")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "delta"
        assert data["tasksCompleted"] == 1
        assert data["favoriteActivity"] == "cron"

    def test_stats_unknown_agent(self, test_client: TestClient):
        response = test_client.get("/api/stats/ghost")

        assert response.status_code == 404


class TestLogsEndpoint:
    """Test the server log endpoint."""

    def test_logs_without_logging_manager(self, test_client: TestClient):
        response = test_client.get("/api/logs")

        assert response.status_code == 503

    def test_logs_with_logging_manager(self, synchronizer: GatewayLogSynchronizer):
        logging_manager = MagicMock(spec=LoggingManager)
        logging_manager.get_recent_logs.return_value = [{"message": "hello"}]
        server = AgentOfficeServer(ServerConfig(), synchronizer, logging_manager)

        with TestClient(server.app) as client:
            response = client.get("/api/logs?limit=5")

        assert response.status_code == 200
        assert response.json() == {"logs": [{"message": "hello"}]}
        logging_manager.get_recent_logs.assert_called_once_with(5)


class TestStartServer:
    """Test uvicorn bootstrap."""

    @pytest.mark.asyncio
    async def test_start_server_uses_config(self, synchronizer: GatewayLogSynchronizer):
        config = ServerConfig(server_host="0.0.0.0", server_port=3999, log_level="DEBUG")
        server = AgentOfficeServer(config, synchronizer)

        with patch("uvicorn.Server") as mock_server_cls, patch("uvicorn.Config") as mock_config:
            mock_server_cls.return_value.serve = AsyncMock()
            await server.start_server()

        mock_config.assert_called_once_with(
            server.app, host="0.0.0.0", port=3999, log_level="debug"
        )
        mock_server_cls.return_value.serve.assert_awaited_once()


class TestServerConfig:
    """Test ServerConfig environment loading."""

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("AGENTOFFICE_HOST", "0.0.0.0")
        monkeypatch.setenv("AGENTOFFICE_PORT", "8080")
        monkeypatch.setenv("AGENTOFFICE_LOG_DIR", "/tmp/test_logs")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.server_host == "0.0.0.0"
        assert config.server_port == 8080
        assert config.log_dir == "/tmp/test_logs"
        assert config.log_level == "DEBUG"

    def test_invalid_port(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("AGENTOFFICE_PORT", "http")

        with pytest.raises(ValueError, match="AGENTOFFICE_PORT"):
            ServerConfig.from_env()
