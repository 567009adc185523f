"""Scan report model and the pure transforms applied to it."""
