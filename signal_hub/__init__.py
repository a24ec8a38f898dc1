"""
Signal Hub - Real-time Trading Signal Push Channel

A WebSocket push channel that fans out buy/sell trading signals to every
connected listener, either on demand or from a periodic demo generator,
together with a listener client that reconnects after transient drops.
"""

__version__ = "0.1.0"
__author__ = "Signal Hub Team"
