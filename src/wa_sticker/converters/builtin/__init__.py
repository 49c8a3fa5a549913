"""Builtin converters registered on import."""
