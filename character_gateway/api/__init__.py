"""HTTP API of the character gateway."""
