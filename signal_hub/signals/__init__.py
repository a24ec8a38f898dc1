"""
Signal model and generation module.

Defines the buy/sell signal broadcast to listeners and the generator that
creates signals on demand or from the periodic demo timer.
"""
