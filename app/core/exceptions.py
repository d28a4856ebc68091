# /app/core/exceptions.py

"""
Business-level exceptions raised by the service layer.

Both subclass `ValueError` so a router can catch them together, but they map
to different HTTP codes: a missing parent is a 404, a refused operation is a
409.
"""


class NotFoundError(ValueError):
    """A write path referenced a class, task, subject, option or person that does not exist."""


class InvalidStateError(ValueError):
    """The operation is refused by a referential or role policy."""
