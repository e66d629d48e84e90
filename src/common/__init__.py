"""Shared SVG building helpers."""
