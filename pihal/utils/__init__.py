"""Configuration loading, constants and host metadata helpers."""
