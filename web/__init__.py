"""JSON API for the configuration screens."""
