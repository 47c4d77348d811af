"""
Domain layer for wabridge.

- errors: exception hierarchy with stable error codes
- interfaces: collaborator contracts (messaging client, broadcast sink)
- models: extraction results and webhook payloads
"""
