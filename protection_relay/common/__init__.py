"""
Package marker for `protection_relay.common`.
It holds cross-cutting helpers such as process settings and logging setup.
"""
