#!/usr/bin/env python3
"""
Static file server bootstrap
Starts an aiohttp app over HTTP or HTTPS, mounts an optional router and static roots,
and walks up from the requested port until one binds
"""

import asyncio
import errno
import logging
import ssl
from dataclasses import dataclass
from typing import Optional, Tuple

from aiohttp import web

from .config import ServerConfig
from .log_sink import LogSink, make_log_sink
from .static_files import mount_static

logger = logging.getLogger(__name__)

MAX_PORT = 65535


class PortsExhaustedError(OSError):
    """Every port tried was already in use"""

    def __init__(self, first_port: int, last_port: int, attempts: int):
        super().__init__(
            errno.EADDRINUSE,
            f"No free port in {first_port}-{last_port} after {attempts} attempts",
        )
        self.first_port = first_port
        self.last_port = last_port
        self.attempts = attempts


def is_address_in_use(error: BaseException) -> bool:
    return isinstance(error, OSError) and error.errno == errno.EADDRINUSE


def running_message(scheme: str, port: int) -> str:
    return f"Static file server running on: {scheme}://localhost:{port} (CTRL + C to shut down)"


@dataclass
class ServerHandle:
    """Live server returned by a successful bootstrap"""
    app: web.Application
    runner: web.AppRunner
    site: web.TCPSite
    port: int
    scheme: str
    message: str
    log: LogSink
    root: Optional[str] = None
    project_root: Optional[str] = None

    @property
    def url(self) -> str:
        return f"{self.scheme}://localhost:{self.port}"

    async def close(self):
        """Stop listening and release the app"""
        await self.runner.cleanup()
        logger.info(f"Static file server on port {self.port} stopped")


class ServerBootstrap:
    """Startup sequence for one static server"""

    def __init__(self, config: Optional[ServerConfig] = None, app: Optional[web.Application] = None):
        self.config = config or ServerConfig()
        self.app = app if app is not None else web.Application()
        self.log = make_log_sink(self.config)

    async def start(self) -> ServerHandle:
        """Mount everything, bind a port, and report the running server"""
        config = self.config

        # TLS credentials are loaded before any listener exists; failures are fatal
        ssl_context = self._create_ssl_context() if config.use_https else None

        if config.router is not None:
            self.app.add_routes(config.router)
        if config.root:
            mount_static(self.app, config.root)
        # Second root, e.g. sources that transpiled files under root map back to
        if config.project_root:
            mount_static(self.app, config.project_root)

        runner = web.AppRunner(self.app)
        await runner.setup()
        try:
            site, port = await self._bind(runner, ssl_context)
        except Exception:
            await runner.cleanup()
            raise

        message = running_message(config.scheme, port)
        if not config.no_server_info:
            self.log(message)

        return ServerHandle(
            app=self.app,
            runner=runner,
            site=site,
            port=port,
            scheme=config.scheme,
            message=message,
            log=self.log,
            root=config.root,
            project_root=config.project_root,
        )

    async def _bind(self, runner: web.AppRunner, ssl_context: Optional[ssl.SSLContext]) -> Tuple[web.TCPSite, int]:
        """Try ports upward from the requested one; only address-in-use is retried"""
        first_port = port = self.config.resolved_port
        max_attempts = max(1, self.config.max_port_attempts)
        attempts = 0

        while True:
            attempts += 1
            site = web.TCPSite(runner, self.config.host, port, ssl_context=ssl_context)
            try:
                await site.start()
                logger.debug(f"Bound {self.config.host}:{port} after {attempts} attempt(s)")
                return site, port
            except OSError as e:
                await site.stop()
                if not is_address_in_use(e):
                    logger.error(f"Failed to bind {self.config.host}:{port}: {e}")
                    raise
                if attempts >= max_attempts or port >= MAX_PORT:
                    raise PortsExhaustedError(first_port, port, attempts) from e
                logger.info(f"Port {port} already in use, trying {port + 1}")
                port += 1

    def _create_ssl_context(self) -> ssl.SSLContext:
        """Create SSL context from the configured key and certificate"""
        ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)

        try:
            ssl_context.load_cert_chain(self.config.ssl_cert_path, self.config.ssl_key_path)
            logger.info(f"SSL enabled with cert: {self.config.ssl_cert_path}")
            return ssl_context
        except Exception as e:
            logger.error(f"Failed to load SSL certificates: {e}")
            raise


async def start(config: Optional[ServerConfig] = None, app: Optional[web.Application] = None) -> ServerHandle:
    """Bootstrap a server and return its handle"""
    return await ServerBootstrap(config, app).start()


async def start_server(config: Optional[ServerConfig] = None, app: Optional[web.Application] = None) -> str:
    """Bootstrap a server and return only the running message"""
    handle = await start(config, app)
    return handle.message


async def serve_forever(config: Optional[ServerConfig] = None, app: Optional[web.Application] = None):
    """Run until cancelled, then shut the listener down"""
    handle = await start(config, app)
    try:
        await asyncio.Event().wait()
    finally:
        await handle.close()
