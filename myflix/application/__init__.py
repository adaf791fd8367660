"""Application services orchestrating the domain."""
