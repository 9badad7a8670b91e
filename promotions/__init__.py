"""Promotion condition evaluation service."""
