"""HTTP layer for the protection fee relay."""
