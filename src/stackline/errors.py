"""Errors raised by the stackline core."""


class InvariantViolationError(AssertionError):
    """An internal contract of the branch index was broken.

    Raised when a stored branch group is empty or when a lookup documented as
    always-succeeding fails. This signals a bug, not a runtime condition, so
    it is never caught inside stackline.
    """
