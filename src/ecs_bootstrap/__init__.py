"""Start one ECS task on the container instance this process runs on."""

__version__ = "0.1.0"
