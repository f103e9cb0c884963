"""HTTP API for marketplace settlement."""
