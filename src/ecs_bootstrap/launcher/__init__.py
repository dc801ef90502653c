"""Task placement and run confirmation against the ECS API."""
