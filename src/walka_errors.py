"""Errors raised by the walk engine.

Stepping an empty digit stream is not an error: the step is a no-op and
returns None.
"""


class WalkaError(Exception):
    pass


class InvalidConfiguration(WalkaError, ValueError):
    """An option or digit value was rejected; the previous settings stay."""


class SurfaceUnavailable(WalkaError, RuntimeError):
    """Render surfaces could not be (re)created. Rendering cannot continue."""
