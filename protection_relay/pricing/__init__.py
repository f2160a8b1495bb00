"""
Package marker for `protection_relay.pricing`.
It groups the protection fee policy, its configuration, and the per-variant lock registry.
"""
