"""Character gateway: hides an upstream API key behind a single JSON endpoint."""

__version__ = "0.1.0"
