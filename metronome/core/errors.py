class MetronomeError(Exception):
    """Base class for errors raised by the task-time core."""


class NotFoundError(MetronomeError, LookupError):
    """No task record matches the requested name or criteria."""


class InvalidInputError(MetronomeError, ValueError):
    """A task name or other argument was rejected before touching the store."""
