"""Discourse admin API client."""
