from .webhook_sender import WebhookSender

__all__ = ["WebhookSender"]
