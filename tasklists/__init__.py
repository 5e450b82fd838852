"""Collect checkbox task lines from a notes vault into one generated TODO document."""

__version__ = "1.0.0"
