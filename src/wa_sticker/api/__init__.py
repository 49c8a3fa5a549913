"""HTTP API for the sticker service."""
