"""Object store backend implementations."""
