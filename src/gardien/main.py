"""
Gardien - Sign-In-With-Ethereum challenge server

Orchestrates Clean Architecture components to issue single-use
challenges and verify signed messages for EOA and smart-contract
wallets.
"""

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from gardien.config.settings import Settings, get_settings
from gardien.di import Container
from gardien.domain.exceptions import GardienException
from gardien.presentation.api.dependencies import set_container
from gardien.presentation.api.middleware import (
    MetricsMiddleware,
    RequestIDMiddleware,
    gardien_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from gardien.presentation.api.routes import auth, health, metrics


class GardienApp:
    """
    Gardien application orchestrator.

    Responsibilities:
        - Initialize DI container
        - Setup FastAPI application, middleware and routes
        - Start and stop the challenge expiry sweep with the app lifespan
        - Run uvicorn server
    """

    def __init__(self, settings: Settings, container: Optional[Container] = None):
        """
        Initialize Gardien application.

        Args:
            settings: Application settings
            container: Optional prebuilt container (tests)
        """
        self.settings = settings
        self.container = container or Container(settings)
        self.reporter = self.container.reporter

        self.app = self._create_app()

        # Global container for FastAPI dependencies
        set_container(self.container)

        self.server: Optional[uvicorn.Server] = None

        self.reporter.info(
            f"Gardien initialized (env: {settings.ENV})",
            context="Gardien",
            verbose_level=1,
        )

    def _create_app(self) -> FastAPI:
        """
        Create FastAPI application with lifespan management.

        Returns:
            Configured FastAPI application
        """

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self._on_startup()
            yield
            await self._on_shutdown()

        app = FastAPI(
            title=self.settings.APP_NAME,
            description="Sign-In-With-Ethereum challenge issuance and verification",
            version=self.settings.APP_VERSION,
            lifespan=lifespan,
        )
        app.state.container = self.container

        app.add_exception_handler(GardienException, gardien_exception_handler)
        app.add_exception_handler(RequestValidationError, validation_exception_handler)
        app.add_exception_handler(Exception, unhandled_exception_handler)

        # Last added runs first: request id must be set before anything logs
        if self.settings.metrics_enabled:
            app.add_middleware(MetricsMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )
        app.add_middleware(RequestIDMiddleware)

        app.include_router(auth.router, prefix=self.settings.api_prefix)
        app.include_router(health.router)
        if self.settings.metrics_enabled:
            app.include_router(metrics.router)

        return app

    async def _on_startup(self) -> None:
        """Start the challenge sweep and log the effective configuration."""
        self.reporter.info("Gardien starting...", context="Gardien", verbose_level=1)

        await self.container.start()

        if self.settings.nonce_sweep_enabled:
            self.reporter.info(
                f"Challenge expiry: every {self.settings.nonce_sweep_interval_seconds}s",
                context="Gardien",
                verbose_level=1,
            )
        else:
            self.reporter.warning(
                "Challenge expiry sweep DISABLED", context="Gardien", verbose_level=1
            )

        if self.settings.rpc_url:
            self.reporter.info(
                f"Contract wallet verification via {self.settings.rpc_url}",
                context="Gardien",
                verbose_level=1,
            )
        else:
            self.reporter.info(
                "Contract wallet verification DISABLED (no rpc_url)",
                context="Gardien",
                verbose_level=1,
            )

        self.reporter.info(
            f"Host: {self.settings.host}:{self.settings.port}",
            context="Gardien",
            verbose_level=1,
        )

    async def _on_shutdown(self) -> None:
        """Stop the sweep and release the RPC session."""
        self.reporter.info("Gardien shutting down...", context="Gardien", verbose_level=1)
        await self.container.shutdown()
        self.reporter.info("Gardien stopped", context="Gardien", verbose_level=1)

    async def serve(self) -> None:
        """Run uvicorn server until stopped."""
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level,
        )
        self.server = uvicorn.Server(config)
        await self.server.serve()

    def start(self) -> None:
        """
        Start Gardien server.

        Blocks until server is stopped.
        """
        asyncio.run(self.serve())


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (global settings when None)
        container: Optional prebuilt container

    Returns:
        FastAPI application
    """
    if settings is None:
        settings = container.settings if container is not None else get_settings()
    return GardienApp(settings, container=container).app


def main():
    """
    Main entry point for Gardien application.

    Loads configuration and starts the server.
    """
    config = get_settings()

    # Allow port override from command line
    if len(sys.argv) > 1:
        try:
            config.port = int(sys.argv[1])
        except ValueError:
            print(f"Invalid port: {sys.argv[1]}")
            sys.exit(1)

    app = GardienApp(config)

    try:
        app.start()
    except KeyboardInterrupt:
        print("\nGardien stopped by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
