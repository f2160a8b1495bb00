"""
Package marker for the protection fee relay.
It groups related modules under a stable import path and keeps package boundaries explicit.
Most functionality lives in the sibling packages; this file intentionally stays lightweight.
"""
