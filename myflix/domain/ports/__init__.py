"""Ports (interfaces) implemented by infrastructure adapters."""
