"""Services for the schema evolution engine."""
