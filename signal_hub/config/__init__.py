"""
Configuration module.

Default parameters, YAML-backed loading with precedence, and validation
for the server, the periodic generator, the listener client and the
instrument catalog.
"""
