"""Channel implementations, one module per channel type."""
