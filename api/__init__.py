"""HTTP transport for orderguard."""
