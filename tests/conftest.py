"""
Test fixtures and configuration.
"""

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from gardien.config.settings import Settings
from gardien.di import Container
from gardien.infrastructure.monitoring import SystemReporter
from gardien.main import create_app
from gardien.presentation.api.dependencies import set_container
from tests.helpers import FakeChainReader


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: no RPC, no background sweep."""
    return Settings(
        ENV="test",
        rpc_url=None,
        nonce_sweep_enabled=False,
        log_level="warning",
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture
def reporter() -> SystemReporter:
    """Quiet reporter shared by components under test."""
    return SystemReporter(name="gardien-test", verbose=0)


@pytest.fixture
def chain_reader() -> FakeChainReader:
    """Chain reader with no deployed contracts."""
    return FakeChainReader()


@pytest.fixture
def container(
    settings: Settings, chain_reader: FakeChainReader, reporter: SystemReporter
) -> Container:
    """DI container wired to the fake chain reader."""
    return Container(settings, chain_reader=chain_reader, reporter=reporter)


@pytest_asyncio.fixture
async def client(container: Container) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Provide HTTP client for API testing.

    Runs the app in-process over ASGI; no lifespan events are sent.
    """
    app = create_app(container=container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await container.shutdown()
    set_container(None)
