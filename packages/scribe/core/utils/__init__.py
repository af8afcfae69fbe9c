"""Shared utilities for Scribe."""
