"""Snapshot sinks."""
