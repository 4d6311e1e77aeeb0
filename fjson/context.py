"""
Process-wide default ObjectMapper, with a context manager for scoped overrides.

The default is meant to be configured once at start-up with `set_mapper` and
only read afterwards. Reconfiguring at runtime is last-writer-wins; callers
that need isolation should use `mapper_context` instead.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from .mapper import ObjectMapper

logger = logging.getLogger(__name__)


def new_default_mapper() -> ObjectMapper:
    """Mapper with the library defaults (lax conversion, None fields omitted)."""
    return ObjectMapper()


_default_mapper: ObjectMapper = new_default_mapper()

# Context variable for scoped overrides
_mapper_override: ContextVar[Optional[ObjectMapper]] = ContextVar(
    "mapper_override", default=None
)


def set_mapper(mapper: ObjectMapper) -> None:
    """Replace the process-wide default mapper."""
    global _default_mapper
    logger.info("Replacing default object mapper with %r", mapper)
    _default_mapper = mapper


def get_mapper() -> ObjectMapper:
    """The mapper in effect: the innermost `mapper_context`, else the default."""
    override = _mapper_override.get()
    return override if override is not None else _default_mapper


@contextmanager
def mapper_context(mapper: ObjectMapper) -> Iterator[ObjectMapper]:
    """
    Context manager using `mapper` instead of the default for the enclosed block.

    Example:
        from fjson import decoders
        from fjson.context import mapper_context
        from fjson.mapper import ObjectMapper

        read_user = decoders.from_class(User)

        # Lax - "42" is accepted for an int field
        read_user.decode({"id": "42"})

        # Strict - the same tree fails
        with mapper_context(ObjectMapper(strict=True)):
            read_user.decode({"id": "42"})
    """
    token = _mapper_override.set(mapper)
    try:
        yield mapper
    finally:
        _mapper_override.reset(token)
