from ecs_bootstrap.main import ecs_bootstrap

ecs_bootstrap()
