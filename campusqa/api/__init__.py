"""HTTP API layer over the service layer."""
