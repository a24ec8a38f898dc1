"""
Listener client module.

A reconnecting WebSocket client that identifies itself, keeps the
connection alive with periodic pings, surfaces received signals and
reconnects after a fixed delay whenever the connection drops.

States: DISCONNECTED → CONNECTING → CONNECTED → DISCONNECTED → ...
"""
