"""Hashing, encoding and wire-format helpers."""
