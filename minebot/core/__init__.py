"""Cross-cutting configuration and logging."""
