"""
Gateway - live connection to the Discord gateway.

Owns one WebSocket, drives the Hello -> heartbeat -> Identify handshake,
routes inbound frames to one-shot opcode waiters or to event channels, and
keeps the heartbeat going until the socket closes.
REST client exposed directly for API calls.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from websockets.asyncio.client import ClientConnection
from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError

from datcord.client.rest import ApiClient
from datcord.client.streaming import (
    GatewayMessage,
    HelloPayload,
    IdentifyPayload,
    Opcode,
    gateway_socket_url,
)
from datcord.config import ClientConfig

from .emitter import EventEmitter, Listener
from .errors import GatewayError, GatewayProtocolError
from .event import (
    GATEWAY_CLOSE,
    GATEWAY_ERROR,
    GATEWAY_MESSAGE,
    GATEWAY_OPEN,
    GATEWAY_PROTOCOL_ERROR,
    GATEWAY_SEND,
    SOCKET_CLOSE,
    SOCKET_ERROR,
    SOCKET_OPEN,
    CloseEvent,
    ErrorEvent,
    OpenEvent,
    ProtocolErrorEvent,
    SendEvent,
    dispatch_channel,
)

logger = logging.getLogger(__name__)

DEFAULT_CLOSE_CODE = 4000
READY_EVENT = "READY"


@dataclass
class HeartbeatState:
    """Per-connection heartbeat bookkeeping."""

    task: asyncio.Task | None = None
    acknowledged: bool = False
    last_sequence: int | None = None


@dataclass(eq=False)
class _OpcodeWait:
    opcode: int
    future: asyncio.Future


class Gateway:
    """
    Live connection to the gateway.

    Construction does no I/O; connect() discovers the socket URL over REST,
    opens the socket and returns once Identify has been sent.

    Example:
        gateway = Gateway("Bot abc...", {"intents": 513})

        @gateway.on("gateway.event.MESSAGE_CREATE")
        async def on_message(payload):
            print(payload["content"])

        async with gateway:
            await gateway.run_forever()
    """

    def __init__(
        self,
        token: str,
        config: ClientConfig | dict[str, Any] | None = None,
        rest: ApiClient | None = None,
    ):
        if not isinstance(config, ClientConfig):
            config = ClientConfig.from_dict(config)
        self.token = token
        self.config = config

        # REST client - exposed directly
        self.rest = rest or ApiClient(token, config)
        self._owns_rest = rest is None

        self.events = EventEmitter()

        self._ws: ClientConnection | None = None
        self._reader_task: asyncio.Task | None = None
        self._heartbeat = HeartbeatState()
        self._opcode_waits: list[_OpcodeWait] = []
        self._awaiting_ready = False

    @property
    def is_open(self) -> bool:
        return self._ws is not None

    @property
    def sequence(self) -> int | None:
        """Last sequence number received from the server."""
        return self._heartbeat.last_sequence

    # --- Subscriptions ---

    def on(self, event: str, listener: Listener | None = None):
        return self.events.on(event, listener)

    def once(self, event: str, listener: Listener | None = None):
        return self.events.once(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self.events.off(event, listener)

    # --- Connection lifecycle ---

    async def __aenter__(self) -> "Gateway":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._ws is not None:
            await self.close()
        if self._reader_task is not None:
            await self._reader_task
        if self._owns_rest:
            await self.rest.aclose()

    async def connect(self) -> None:
        """
        Discover the gateway URL, open the socket and run the handshake.

        Returns after Identify is sent. Blocks until Hello arrives; wrap in
        asyncio.wait_for() to bound it. If the handshake fails or is
        cancelled, the socket is closed and connect() may be called again.

        Raises:
            GatewayProtocolError: If discovery returns no url or Hello is malformed
            GatewayError: If the socket closes before Hello
        """
        if self._ws is not None:
            logger.warning("[Gateway] Already connected")
            return

        response = await self.rest.get(self.config.gateway_query)
        if not isinstance(response, dict) or not response.get("url"):
            raise GatewayProtocolError(
                f"Gateway discovery returned no url: {response!r}"
            )

        url = gateway_socket_url(response["url"])
        logger.info(f"[Gateway] Connecting to {url}")
        self._ws = await ws_connect(url)
        self._reader_task = asyncio.create_task(self._reader_loop(self._ws))
        try:
            await self._on_open()
        except BaseException:
            logger.warning("[Gateway] Handshake did not complete, dropping socket")
            await self._abandon_connection()
            raise

    async def run_forever(self) -> None:
        """Wait until the socket closes."""
        if self._reader_task is None:
            raise RuntimeError("Not connected")
        await self._reader_task

    async def send(self, opcode: int, data: Any) -> None:
        """Send a frame. Sequence and event name are always null on outbound frames."""
        if self._ws is None:
            raise RuntimeError("Not connected")

        frame = GatewayMessage.outbound(opcode, data)
        await self._ws.send(frame.to_json())
        logger.debug(f"[Gateway] Sent op={frame.opcode}")
        self.events.emit(GATEWAY_SEND, SendEvent(opcode=frame.opcode, data=data))

    async def close(
        self, code: int = DEFAULT_CLOSE_CODE, reason: str | None = None
    ) -> None:
        """Close the socket. Teardown and close events follow from the reader loop."""
        if self._ws is None:
            raise RuntimeError("Not connected")

        logger.info(f"[Gateway] Closing socket with code {code}")
        await self._ws.close(code, reason or "")

    def wait_for_opcode(self, opcode: int) -> asyncio.Future[GatewayMessage]:
        """
        Future resolving with the next inbound frame carrying `opcode`.

        A resolved wait consumes its frame; it is not routed any further.
        There is no timeout.
        """
        future: asyncio.Future[GatewayMessage] = (
            asyncio.get_running_loop().create_future()
        )
        wait = _OpcodeWait(opcode=int(opcode), future=future)
        self._opcode_waits.append(wait)
        future.add_done_callback(lambda _: self._discard_wait(wait))
        return future

    # --- Handshake ---

    async def _on_open(self) -> None:
        self.events.emit(SOCKET_OPEN, OpenEvent())

        hello_wait = self.wait_for_opcode(Opcode.HELLO)
        try:
            done, _ = await asyncio.wait(
                {hello_wait, self._reader_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            # asyncio.wait leaves its futures pending when it is cancelled
            if not hello_wait.done():
                hello_wait.cancel()
        if hello_wait not in done:
            raise GatewayError("Socket closed before Hello")

        try:
            hello = HelloPayload.model_validate(hello_wait.result().data)
        except ValidationError as e:
            await self.close()
            raise GatewayProtocolError(f"Malformed Hello: {e}") from e

        logger.debug(f"[Gateway] Hello, heartbeat every {hello.heartbeat_interval}ms")
        await self._send_heartbeat()
        self._start_heartbeat(hello.heartbeat_interval / 1000)

        identify = IdentifyPayload(
            token=self.token,
            properties=self.config.properties,
            presence=self.config.default_presence,
            intents=self.config.intents,
        )
        await self.send(Opcode.IDENTIFY, identify.model_dump(mode="json"))
        logger.info("[Gateway] Identified")

        if self.config.wait_for_ready:
            self._awaiting_ready = True
        else:
            self.events.emit(GATEWAY_OPEN, OpenEvent())

    async def _abandon_connection(self) -> None:
        ws, reader = self._ws, self._reader_task
        self._stop_heartbeat()
        self._awaiting_ready = False
        if ws is not None:
            await ws.close(DEFAULT_CLOSE_CODE, "")
        if reader is not None:
            # The reader ends once the close completes and emits the close events
            await reader
        self._ws = None
        self._reader_task = None

    # --- Heartbeat ---

    async def _send_heartbeat(self) -> None:
        await self.send(Opcode.HEARTBEAT, self._heartbeat.last_sequence)
        self._heartbeat.acknowledged = False

    def _start_heartbeat(self, interval: float) -> None:
        self._stop_heartbeat()
        self._heartbeat.task = asyncio.create_task(self._heartbeat_loop(interval))

    def _stop_heartbeat(self) -> None:
        task = self._heartbeat.task
        self._heartbeat.task = None
        if task is not None:
            task.cancel()

    async def _heartbeat_loop(self, interval: float) -> None:
        loop = asyncio.get_running_loop()
        next_beat = loop.time() + interval
        try:
            while True:
                # Fixed schedule; send latency must not stretch the period
                await asyncio.sleep(max(0.0, next_beat - loop.time()))
                next_beat += interval
                if not self._heartbeat.acknowledged:
                    logger.warning("[Gateway] Heartbeat not acknowledged, closing")
                    # Closing triggers _stop_heartbeat, which cancels this task
                    await asyncio.shield(self.close())
                    return
                await self._send_heartbeat()
        except ConnectionClosed:
            logger.debug("[Gateway] Heartbeat stopped, socket closed")

    # --- Inbound ---

    async def _reader_loop(self, ws: ClientConnection) -> None:
        try:
            async for raw in ws:
                await self._on_message(raw)
        except ConnectionClosedError as e:
            if e.rcvd is None and e.sent is None:
                # No close frame either way: the transport itself failed
                error = e.__cause__ or e
                logger.error(f"[Gateway] Socket error: {error!r}")
                self._ws = None
                self._on_error(error)
        except ConnectionClosed:
            pass
        except Exception as e:
            logger.error(f"[Gateway] Socket error: {e}")
            self._ws = None
            self._on_error(e)
            await ws.close()
            return

        self._ws = None
        self._on_close(ws.close_code, ws.close_reason or None)

    async def _on_message(self, raw: str | bytes) -> None:
        try:
            message = GatewayMessage.model_validate_json(raw)
        except ValidationError as e:
            error = GatewayProtocolError(f"Malformed gateway frame: {e}")
            logger.warning(f"[Gateway] {error}")
            self.events.emit(
                GATEWAY_PROTOCOL_ERROR, ProtocolErrorEvent(error=error, raw=raw)
            )
            return

        logger.debug(
            f"[Gateway] Received op={message.opcode} s={message.sequence} t={message.event}"
        )
        self.events.emit(GATEWAY_MESSAGE, message)

        if message.sequence is not None:
            self._heartbeat.last_sequence = message.sequence

        if self._resolve_opcode_wait(message):
            return

        if message.opcode == Opcode.HEARTBEAT:
            await self._send_heartbeat()
        elif message.opcode == Opcode.HEARTBEAT_ACK:
            self._heartbeat.acknowledged = True
        elif message.opcode == Opcode.RECONNECT:
            logger.warning("[Gateway] Server requested reconnect, closing")
            await self.close()
        elif message.opcode == Opcode.INVALID_SESSION:
            logger.warning("[Gateway] Invalid session, closing")
            await self.close()
        elif message.opcode == Opcode.DISPATCH:
            if message.event is None:
                logger.warning(
                    f"[Gateway] Dispatch s={message.sequence} has no event name, skipping"
                )
                return
            self.events.emit(dispatch_channel(message.event), message.data)
            if self._awaiting_ready and message.event == READY_EVENT:
                self._awaiting_ready = False
                self.events.emit(GATEWAY_OPEN, OpenEvent())

    def _resolve_opcode_wait(self, message: GatewayMessage) -> bool:
        for wait in self._opcode_waits:
            if wait.opcode == message.opcode and not wait.future.done():
                self._opcode_waits.remove(wait)
                wait.future.set_result(message)
                return True
        return False

    def _discard_wait(self, wait: _OpcodeWait) -> None:
        if wait in self._opcode_waits:
            self._opcode_waits.remove(wait)

    # --- Terminal events ---

    def _on_close(self, code: int | None, reason: str | None) -> None:
        self._stop_heartbeat()
        self._awaiting_ready = False
        logger.info(f"[Gateway] Closed: {code} {reason or ''}".rstrip())
        event = CloseEvent(code=code, reason=reason)
        self.events.emit(GATEWAY_CLOSE, event)
        self.events.emit(SOCKET_CLOSE, event)

    def _on_error(self, error: BaseException) -> None:
        self._stop_heartbeat()
        self._awaiting_ready = False
        event = ErrorEvent(error=error)
        self.events.emit(GATEWAY_ERROR, event)
        self.events.emit(SOCKET_ERROR, event)
