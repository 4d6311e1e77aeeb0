from . import decoders, encoders, formats, schema, tree
from .context import get_mapper, mapper_context, new_default_mapper, set_mapper
from .core import Decoder, Encoder, Format, to_decoder, to_encoder
from .errors import FieldError, MissingValueError, field_error
from .mapper import ObjectMapper
from .types import Failure, ParseResult, Success, failure, sequence, success

__all__ = [
    "Decoder",
    "Encoder",
    "Format",
    "ParseResult",
    "Success",
    "Failure",
    "FieldError",
    "MissingValueError",
    "ObjectMapper",
    "decoders",
    "encoders",
    "formats",
    "schema",
    "tree",
    "field_error",
    "success",
    "failure",
    "sequence",
    "to_decoder",
    "to_encoder",
    "get_mapper",
    "set_mapper",
    "new_default_mapper",
    "mapper_context",
]
