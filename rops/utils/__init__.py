"""Shared helpers for paths and secrets."""
