"""Test package for the sticker toolkit."""
