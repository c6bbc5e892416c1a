from .singleton import singleton  # noqa: F401
