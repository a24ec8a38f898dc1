"""
Utility functions module.

Common utility functions for time handling shared across the server and
the listener client.

Time Semantics:
- All timestamps are UTC wall-clock time
- Wire timestamps are ISO-8601 with millisecond precision and a "Z" suffix
- Signal ids are derived from a millisecond clock and never repeat in-process
"""
