"""Utilities - formatting and export."""
