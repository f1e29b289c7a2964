"""
Context manager for deserialization configuration (e.g., strict mode).
"""

from contextlib import contextmanager
from contextvars import ContextVar

# Context variable for strict mode
_strict_mode: ContextVar[bool] = ContextVar("strict_mode", default=False)


def is_strict() -> bool:
    """Check if strict mode is currently enabled."""
    return _strict_mode.get()


@contextmanager
def deserialization_context(*, strict: bool = False):
    """
    Context manager for deserialization configuration.

    Args:
        strict: If True, objects without their own strictness setting reject
               fields the schema does not declare, instead of discarding them.

    Example:
        from jsontrail import deserialize, deserialization_context

        schema = {"known": int}

        deserialize(b'{"known": 1, "extra": 2}', schema)  # Ok({"known": 1})

        with deserialization_context(strict=True):
            deserialize(b'{"known": 1, "extra": 2}', schema)  # Err(UnknownField)
    """
    token = _strict_mode.set(strict)
    try:
        yield
    finally:
        _strict_mode.reset(token)
