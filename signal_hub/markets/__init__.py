"""
Market catalog module.

Instrument catalogs grouped by market kind, with the base prices the demo
generator perturbs and the display names attached to broadcast signals.
"""
