"""Sample connectors and the service table that exposes them."""
