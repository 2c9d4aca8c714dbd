"""Parsing and transpiling helpers."""
