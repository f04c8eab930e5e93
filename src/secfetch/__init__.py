"""Resolve secret placeholders in streamed text."""

__version__ = "1.0.0"
