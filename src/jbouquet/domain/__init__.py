"""Domain errors and value objects; no I/O."""
