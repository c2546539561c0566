"""Geometry and timing helpers."""
