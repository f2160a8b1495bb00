"""
Package marker for `protection_relay.storefront`.
It contains the outbound client for the storefront Admin API.
"""
