"""Client session for an external language server spoken to over stdio.

The server does the actual template and TypeScript analysis. This session
opens one document at a time, waits for the diagnostics the server publishes
for it, and closes it again.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
from collections.abc import Sequence
from typing import Any

from vue_type_check import __version__
from vue_type_check.diagnostics import Diagnostic
from vue_type_check.document import TextDocument
from vue_type_check.errors import LanguageServerError
from vue_type_check.services.environment import EnvironmentService
from vue_type_check.services.jsonrpc import METHOD_NOT_FOUND, encode_message, read_message

# File extension -> language id expected by the server
LANGUAGE_IDS = {
    "vue": "vue",
    "ts": "typescript",
    "tsx": "typescriptreact",
    "js": "javascript",
}

# Server-to-client requests that only need an empty acknowledgement
_ACKNOWLEDGED_REQUESTS = frozenset(
    {
        "client/registerCapability",
        "client/unregisterCapability",
        "window/workDoneProgress/create",
        "window/showMessageRequest",
    }
)

_EXIT_GRACE_SECONDS = 5.0


class LanguageServerSession:
    """A running language server process and its JSON-RPC conversation.

    Use as an async context manager, or call start() and stop() explicitly.
    stop() always terminates the process, including after failures.

    Attributes:
        command: Argument vector that starts the server in stdio mode.
        environment: Workspace the server is initialized for.
        response_timeout: Seconds to wait for any single reply.
        server_capabilities: Capabilities returned by ``initialize``.
    """

    def __init__(
        self,
        command: Sequence[str],
        environment: EnvironmentService,
        *,
        response_timeout: float = 120.0,
    ) -> None:
        if not command:
            raise ValueError("command must not be empty")
        self.command = list(command)
        self.environment = environment
        self.response_timeout = response_timeout
        self.server_capabilities: dict[str, Any] = {}
        self._process: asyncio.subprocess.Process | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._published: dict[str, asyncio.Future[list[dict[str, Any]]]] = {}
        self._last: tuple[tuple[str, int], list[Diagnostic]] | None = None
        self._failure: LanguageServerError | None = None
        self._next_id = 0

    async def __aenter__(self) -> LanguageServerSession:
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Spawn the server and run the initialize handshake.

        Raises:
            LanguageServerError: If the server cannot be started or rejects
                the handshake.
        """
        if self._process is not None:
            raise LanguageServerError("Language server session already started")
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                cwd=str(self.environment.root_path),
            )
        except OSError as e:
            raise LanguageServerError(
                f"Could not start language server {self.command[0]!r}: {e}"
            ) from e

        self._reader_task = asyncio.create_task(self._read_loop())

        root = self.environment.root_path
        result = await self.request(
            "initialize",
            {
                "processId": os.getpid(),
                "clientInfo": {"name": "vue-type-check", "version": __version__},
                "rootPath": str(root),
                "rootUri": self.environment.root_uri,
                "workspaceFolders": [{"uri": self.environment.root_uri, "name": root.name}],
                "capabilities": {
                    "workspace": {"configuration": True, "workspaceFolders": True},
                    "textDocument": {
                        "synchronization": {"didSave": False, "dynamicRegistration": False},
                        "publishDiagnostics": {"relatedInformation": False},
                    },
                },
                "initializationOptions": {"config": self.environment.config},
            },
        )
        if isinstance(result, dict):
            self.server_capabilities = result.get("capabilities") or {}
        await self.notify("initialized", {})

    async def stop(self) -> None:
        """Shut the server down and reap the process. Safe to call twice."""
        process = self._process
        if process is None:
            return
        try:
            if process.returncode is None and self._failure is None:
                await self.request("shutdown", None)
                # The server may close its pipes as soon as shutdown returns
                with contextlib.suppress(LanguageServerError):
                    await self.notify("exit", None)
        finally:
            if process.stdin is not None and not process.stdin.is_closing():
                process.stdin.close()
            try:
                await asyncio.wait_for(process.wait(), timeout=_EXIT_GRACE_SECONDS)
            except asyncio.TimeoutError:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()
            if self._reader_task is not None:
                self._reader_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._reader_task
            self._process = None
            self._reader_task = None
            self._last = None

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def _send(self, payload: dict[str, Any]) -> None:
        if self._failure is not None:
            raise self._failure
        if self._process is None or self._process.stdin is None:
            raise LanguageServerError("Language server is not running")
        try:
            self._process.stdin.write(encode_message(payload))
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise LanguageServerError(f"Language server pipe closed: {e}") from e

    async def _wait(self, future: asyncio.Future[Any], what: str) -> Any:
        try:
            return await asyncio.wait_for(future, timeout=self.response_timeout)
        except asyncio.TimeoutError as e:
            raise LanguageServerError(
                f"Timed out after {self.response_timeout:g}s waiting for {what}"
            ) from e

    async def request(self, method: str, params: Any) -> Any:
        """Send a request and wait for its result.

        Raises:
            LanguageServerError: On an error response, timeout, or server exit.
        """
        self._next_id += 1
        request_id = self._next_id
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self._send({"jsonrpc": "2.0", "id": request_id, "method": method, "params": params})
            return await self._wait(future, f"{method!r} response")
        finally:
            self._pending.pop(request_id, None)

    async def notify(self, method: str, params: Any) -> None:
        await self._send({"jsonrpc": "2.0", "method": method, "params": params})

    async def _respond(self, request_id: Any, result: Any = None, error: dict[str, Any] | None = None) -> None:
        payload: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id}
        if error is not None:
            payload["error"] = error
        else:
            payload["result"] = result
        await self._send(payload)

    async def _read_loop(self) -> None:
        assert self._process is not None and self._process.stdout is not None
        reader = self._process.stdout
        failure = LanguageServerError("Language server exited unexpectedly")
        try:
            while True:
                message = await read_message(reader)
                if message is None:
                    break
                await self._dispatch(message)
        except LanguageServerError as e:
            failure = e
        except Exception as e:
            failure = LanguageServerError(f"Malformed message from language server: {e!r}")
            failure.__cause__ = e
        finally:
            self._fail_all(failure)

    def _fail_all(self, failure: LanguageServerError) -> None:
        self._failure = failure
        for future in [*self._pending.values(), *self._published.values()]:
            if not future.done():
                future.set_exception(failure)

    async def _dispatch(self, message: dict[str, Any]) -> None:
        method = message.get("method")
        if method is not None and "id" in message:
            await self._handle_server_request(message["id"], method, message.get("params"))
        elif method is not None:
            self._handle_notification(method, message.get("params") or {})
        else:
            future = self._pending.get(message.get("id"))  # type: ignore[arg-type]
            if future is None or future.done():
                return
            if "error" in message:
                error = message["error"] or {}
                future.set_exception(
                    LanguageServerError(
                        str(error.get("message", "unknown error")), code=error.get("code")
                    )
                )
            else:
                future.set_result(message.get("result"))

    async def _handle_server_request(self, request_id: Any, method: str, params: Any) -> None:
        if method == "workspace/configuration":
            items = (params or {}).get("items", [])
            await self._respond(
                request_id,
                [self.environment.get_config_section(item.get("section")) for item in items],
            )
        elif method in _ACKNOWLEDGED_REQUESTS:
            await self._respond(request_id, None)
        else:
            await self._respond(
                request_id,
                error={"code": METHOD_NOT_FOUND, "message": f"Unhandled method {method}"},
            )

    def _handle_notification(self, method: str, params: dict[str, Any]) -> None:
        if method != "textDocument/publishDiagnostics":
            return
        future = self._published.get(params.get("uri", ""))
        if future is not None and not future.done():
            future.set_result(list(params.get("diagnostics") or []))

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    async def diagnostics(self, document: TextDocument) -> list[Diagnostic]:
        """Return the diagnostics the server publishes for a document.

        The document is opened, the first diagnostics notification for its URI
        is taken as the result, and the document is closed. The result for the
        most recent document is kept so template and script validation share
        one round-trip.
        """
        key = (document.uri, document.version)
        if self._last is not None and self._last[0] == key:
            return list(self._last[1])

        future: asyncio.Future[list[dict[str, Any]]] = asyncio.get_running_loop().create_future()
        self._published[document.uri] = future
        try:
            await self.notify(
                "textDocument/didOpen",
                {
                    "textDocument": {
                        "uri": document.uri,
                        "languageId": LANGUAGE_IDS.get(document.language_id, document.language_id),
                        "version": document.version,
                        "text": document.text,
                    }
                },
            )
            raw = await self._wait(future, f"diagnostics for {document.uri}")
        finally:
            self._published.pop(document.uri, None)
        await self.notify("textDocument/didClose", {"textDocument": {"uri": document.uri}})

        result = [Diagnostic.from_lsp(item) for item in raw]
        self._last = (key, result)
        return list(result)
