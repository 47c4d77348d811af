from .media_result import ExtractedMedia
from .payloads import MessagePayload, MessageTextPayload, ReactionPayload, ReceiptPayload

__all__ = [
    "ExtractedMedia",
    "MessagePayload",
    "MessageTextPayload",
    "ReactionPayload",
    "ReceiptPayload",
]
