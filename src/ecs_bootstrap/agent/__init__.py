"""Node identity discovery through the local ECS agent introspection API."""
