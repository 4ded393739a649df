"""Infrastructure layer - logging, persistence adapters and database."""
