from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from dependencies.messages import ConnectionRegistryDep, DeliveryGatewayDep
from helpers.auth import decode_access_token, extract_bearer_token
from logger.logger import get_logger
from realtime.live_session import LiveSession
from utils.exceptions import UnauthenticatedError

logger = get_logger("realtime")

router = APIRouter()

# Application-level close code for a missing or invalid token
WS_CLOSE_UNAUTHENTICATED = 4401

@router.websocket("/ws")
async def live_connection(
    websocket: WebSocket,
    registry: ConnectionRegistryDep,
    gateway: DeliveryGatewayDep
):
    """
    Bidirectional event channel for live delivery.
    Token comes from ``?token=`` or the Authorization header.
    """
    token = websocket.query_params.get("token") or extract_bearer_token(websocket.headers.get("authorization"))
    try:
        identity = decode_access_token(token)
    except UnauthenticatedError as e:
        logger.info(f"Refusing live connection: {e.message}")
        await websocket.close(code=WS_CLOSE_UNAUTHENTICATED)
        return

    await websocket.accept()
    session = LiveSession(identity, websocket, registry, gateway)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info(f"Live connection closed for user {identity.user_id}")
                break
            if frame.get("text") is not None:
                await session.handle_text(frame["text"])
            else:
                await session.handle_binary()
    except WebSocketDisconnect:
        logger.info(f"Live connection closed for user {identity.user_id}")
    finally:
        session.close()
