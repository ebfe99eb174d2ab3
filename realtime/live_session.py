import json
from typing import Any, Optional

from logger.logger import get_logger
from models.auth_model import AuthenticatedIdentity
from models.enums import ClientEvent, ServerEvent
from realtime.connection_registry import ConnectionHandle, ConnectionRegistry
from realtime.delivery_gateway import LiveDeliveryGateway

logger = get_logger("realtime")


class LiveSession:
    """
    Server side of one live connection.

    The socket is authenticated before this object exists; it becomes
    addressable only after an explicit ``user:join`` for that same identity.
    Bad frames are answered with an ``error`` event and never close the socket.
    """

    def __init__(
        self,
        identity: AuthenticatedIdentity,
        connection: ConnectionHandle,
        registry: ConnectionRegistry,
        gateway: LiveDeliveryGateway,
    ):
        self.identity = identity
        self.connection = connection
        self.registry = registry
        self.gateway = gateway
        self.joined = False

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    async def handle_text(self, raw: str) -> None:
        try:
            frame = json.loads(raw)
        except ValueError:
            await self._reply_error("Malformed frame: expected JSON")
            return
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await self._reply_error("Malformed frame: expected {\"event\": ..., \"data\": ...}")
            return
        await self.handle_event(frame["event"], frame.get("data"))

    async def handle_binary(self) -> None:
        await self._reply_error("Malformed frame: binary frames are not supported")

    async def handle_event(self, event: str, data: Any) -> None:
        if event == ClientEvent.USER_JOIN.value:
            await self._join(data)
        elif event == ClientEvent.TYPING_START.value:
            await self._typing(ServerEvent.TYPING_START, data)
        elif event == ClientEvent.TYPING_STOP.value:
            await self._typing(ServerEvent.TYPING_STOP, data)
        else:
            await self._reply_error(f"Unknown event '{event}'")

    async def _join(self, data: Any) -> None:
        requested = data.get("userId") if isinstance(data, dict) else data
        if requested != self.user_id:
            logger.warning(f"Rejected join as {requested!r} on a connection authenticated as {self.user_id}")
            await self._reply_error("Cannot join as another user")
            return

        self.registry.register(self.user_id, self.connection)
        self.joined = True
        await self._reply(ServerEvent.USER_JOINED, {"userId": self.user_id})

    async def _typing(self, event: ServerEvent, data: Any) -> None:
        if not self.joined:
            await self._reply_error("Join before sending typing signals")
            return
        if not isinstance(data, dict) or not data.get("receiverId"):
            await self._reply_error("receiverId is required")
            return

        claimed = data.get("userId")
        if claimed is not None and claimed != self.user_id:
            await self._reply_error("Cannot send typing signals as another user")
            return

        await self.gateway.relay_typing(event, self.user_id, str(data["receiverId"]))

    def close(self) -> None:
        """Forget this connection; a newer connection for the same user is left alone"""
        if self.joined:
            self.registry.unregister(self.user_id, self.connection)
            self.joined = False

    async def _reply(self, event: ServerEvent, data: Optional[dict]) -> None:
        await self.connection.send_json({"event": event.value, "data": data})

    async def _reply_error(self, message: str) -> None:
        await self._reply(ServerEvent.ERROR, {"message": message})
