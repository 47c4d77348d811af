from .message_normalizer import (
    MessageNormalizer,
    build_message_payload,
    build_message_text,
    build_receipt_payload,
)

__all__ = [
    "MessageNormalizer",
    "build_message_payload",
    "build_message_text",
    "build_receipt_payload",
]
