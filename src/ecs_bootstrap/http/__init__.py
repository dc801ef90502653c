"""HTTP access to local agent endpoints."""
