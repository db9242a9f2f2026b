"""Integrations with remote services."""
