"""HTTP listener lifecycle: startup detection, signal handling and graceful shutdown."""

import asyncio
import contextlib
import signal
import socket
from enum import Enum
from typing import Iterator

import structlog
import uvicorn
from fastapi import FastAPI

from bookstore.core.errors import (
    BindError,
    ServerError,
    ServerRuntimeError,
    ShutdownTimeoutError,
)

logger = structlog.get_logger(__name__)

# How long a forced exit may take once the graceful deadline has passed
FORCE_EXIT_WAIT_SECONDS = 1.0

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ServerState(str, Enum):
    """Lifecycle state of the HTTP listener."""

    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    STOPPED = "stopped"
    FAILED = "failed"


class _Server(uvicorn.Server):
    """uvicorn server that leaves termination signals to its owner."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class BookStoreServer:
    """
    Runs an ASGI app on a background task and controls its lifecycle.

    States move one way only: starting -> running -> shutting-down -> stopped,
    or starting -> failed when the listener dies during the startup window.
    """

    def __init__(
        self,
        app: FastAPI,
        host: str = "0.0.0.0",
        port: int = 8080,
        startup_grace: float = 1.0,
        shutdown_timeout: float = 5.0,
    ) -> None:
        self._host = host
        self._port = port
        self._startup_grace = startup_grace
        self._shutdown_timeout = shutdown_timeout
        self._server = _Server(
            uvicorn.Config(
                app,
                host=host,
                port=port,
                lifespan="on",
                log_config=None,
                access_log=False,
            )
        )
        self._state = ServerState.STARTING
        self._address: tuple[str, int] | None = None
        self._task: asyncio.Task | None = None
        self._errors: asyncio.Future | None = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def address(self) -> tuple[str, int] | None:
        """Bound (host, port), available once the socket is bound."""
        return self._address

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self._host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._host, self._port))
        except OSError:
            sock.close()
            raise
        sock.set_inheritable(True)
        return sock

    async def _run(self, sock: socket.socket) -> None:
        # uvicorn calls sys.exit() when lifespan startup fails; SystemExit
        # would escape the event loop instead of ending this task.
        try:
            await self._server.serve(sockets=[sock])
        except SystemExit as e:
            raise ServerError(f"server exited with status {e.code}") from e

    async def listen_and_serve(self) -> asyncio.Future:
        """
        Start serving and wait out the startup window.

        Returns:
            A future that resolves with a ServerRuntimeError if the listener
            stops on its own after startup.

        Raises:
            BindError: if the socket cannot be bound or the listener stops
                before the startup window elapses
        """
        if self._state is not ServerState.STARTING:
            raise ServerError(f"server is already {self._state.value}")

        try:
            sock = self._bind()
        except OSError as e:
            self._state = ServerState.FAILED
            raise BindError(f"listen tcp {self._host}:{self._port}: {e.strerror or e}") from e

        self._address = sock.getsockname()[:2]
        loop = asyncio.get_running_loop()
        self._errors = loop.create_future()
        self._task = asyncio.create_task(self._run(sock))

        done, _ = await asyncio.wait({self._task}, timeout=self._startup_grace)
        if done:
            self._state = ServerState.FAILED
            sock.close()
            exc = None if self._task.cancelled() else self._task.exception()
            if exc is not None:
                raise BindError(f"server failed to start: {exc}") from exc
            raise BindError("server failed to start")

        self._state = ServerState.RUNNING
        self._task.add_done_callback(self._on_serve_done)
        logger.info("Server running", host=self._address[0], port=self._address[1])
        return self._errors

    def _on_serve_done(self, task: asyncio.Task) -> None:
        if self._state is not ServerState.RUNNING or self._errors.done():
            return
        exc = None if task.cancelled() else task.exception()
        if exc is not None:
            error = ServerRuntimeError(f"listener failed: {exc}")
            error.__cause__ = exc
        else:
            error = ServerRuntimeError("listener stopped unexpectedly")
        self._state = ServerState.STOPPED
        self._errors.set_result(error)

    async def shutdown(self, timeout: float | None = None) -> None:
        """
        Stop accepting connections and drain in-flight requests.

        Raises:
            ShutdownTimeoutError: if requests are still running at the
                deadline; the listener is stopped anyway
        """
        if self._state is not ServerState.RUNNING:
            raise ServerError(f"cannot shut down a server that is {self._state.value}")

        timeout = self._shutdown_timeout if timeout is None else timeout
        self._state = ServerState.SHUTTING_DOWN
        logger.info("Server shutting down", timeout=timeout)
        self._server.should_exit = True

        try:
            await asyncio.wait_for(asyncio.shield(self._task), timeout=timeout)
        except asyncio.TimeoutError:
            self._server.force_exit = True
            _, pending = await asyncio.wait({self._task}, timeout=FORCE_EXIT_WAIT_SECONDS)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise ShutdownTimeoutError() from None
        finally:
            self._state = ServerState.STOPPED
        logger.info("Server stopped")


def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop, stop: asyncio.Event
) -> list[signal.Signals]:
    installed = []
    for sig in TERMINATION_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            logger.warning("Signal handling unavailable", signal=sig.name)
            continue
        installed.append(sig)
    return installed


async def serve(server: BookStoreServer, stop: asyncio.Event | None = None) -> int:
    """
    Run the server until a termination signal or a listener failure.

    Args:
        server: Server to start
        stop: Event that triggers shutdown. When omitted, SIGINT and SIGTERM
            set an internal one.

    Returns:
        Process exit code
    """
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    if stop is None:
        stop = asyncio.Event()
        installed = _install_signal_handlers(loop, stop)

    try:
        try:
            errors = await server.listen_and_serve()
        except BindError as e:
            logger.error("web server start failed", error=str(e))
            return 1
        logger.info("web server start ok")

        stopping = asyncio.ensure_future(stop.wait())
        done, _ = await asyncio.wait({errors, stopping}, return_when=asyncio.FIRST_COMPLETED)
        if errors in done:
            stopping.cancel()
            logger.error("web server run failed", error=str(errors.result()))
            return 1

        logger.info("bookstore program is exiting...")
        try:
            await server.shutdown()
        except ShutdownTimeoutError as e:
            logger.error("bookstore program exit error", error=str(e))
            return 1
        except Exception as e:
            logger.exception("bookstore program exit error", error=str(e))
            return 1
        logger.info("bookstore program exit ok")
        return 0
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
