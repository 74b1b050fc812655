"""Re-export the gateway contract and its event types."""

from .base import ChatGateway, ContentDelta, ToolCallEvent, GatewayEvent

__all__ = [
    "ChatGateway",
    "ContentDelta",
    "ToolCallEvent",
    "GatewayEvent",
]
