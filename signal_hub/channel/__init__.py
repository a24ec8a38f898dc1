"""
Broadcast channel module.

Tracks connected listeners and fans out serialized signals to every
listener that is ready to receive. Handles the connect/broadcast/disconnect
lifecycle for the WebSocket server.
"""
