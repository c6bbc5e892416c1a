import functools


def singleton(func):
    """
    Decorator for a zero-argument factory function.
    The first return value is cached on the wrapper; ``wrapper.reset()``
    drops it so the next call rebuilds (used by tests).
    """
    sentinel = object()
    instance = sentinel

    @functools.wraps(func)
    def wrapper():
        nonlocal instance
        if instance is sentinel:
            instance = func()
        return instance

    def reset() -> None:
        nonlocal instance
        instance = sentinel

    wrapper.reset = reset
    return wrapper
