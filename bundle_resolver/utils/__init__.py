"""Utility helpers for bundle-resolver."""
