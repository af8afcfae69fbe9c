"""Response cache backend implementations."""
