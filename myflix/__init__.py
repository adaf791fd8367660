"""
myflix movie-catalog client core.

Keeps the logged-in user's profile and favorite movies consistent between
durable local storage, in-memory state and the remote backend.

Structure:
- domain/: Models, errors, date normalization, ports
- application/: Session store, favorites, profile and auth workflows
- infrastructure/: httpx gateway, storage and presentation adapters
- tests/: Test suite (unit, integration)
"""

__version__ = "1.0.0"
