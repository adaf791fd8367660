"""User domain: user record, session and profile edit models."""
