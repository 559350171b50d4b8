"""Adapters implementing the application-layer ports."""
