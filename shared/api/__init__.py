"""API helpers shared by the domain apps: envelope, pagination, errors."""
