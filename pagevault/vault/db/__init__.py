"""PostgreSQL persistence for the event journal."""
