"""Structured, status-coded errors that survive process boundaries.

Example:
    >>> from rpcerrors import ResourceInfo, StatusCode, annotate, encode, status_of
    >>> err = annotate(LookupError("no rows"), "load cat", StatusCode.NOT_FOUND,
    ...                ResourceInfo(resource_type="pet.v1.Cat", resource_name="cat123"))
    >>> status_of(err)
    <StatusCode.NOT_FOUND: 5>
    >>> str(err)
    'load cat: no rows'
"""

from rpcerrors.codec.json_codec import Decoder
from rpcerrors.codec.json_codec import Encoder
from rpcerrors.codec.json_codec import ErrorDecodeError
from rpcerrors.codec.json_codec import decode
from rpcerrors.codec.json_codec import default_encoder
from rpcerrors.codec.json_codec import encode
from rpcerrors.codec.json_codec import hide_debug_info
from rpcerrors.codec.registry import lookup
from rpcerrors.codec.registry import register
from rpcerrors.codec.registry import registered_types
from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.errors import Annotation
from rpcerrors.core.errors import Message
from rpcerrors.core.errors import Modifier
from rpcerrors.core.errors import StackTrace
from rpcerrors.core.errors import annotate
from rpcerrors.core.predefined import with_aborted
from rpcerrors.core.predefined import with_already_exists
from rpcerrors.core.predefined import with_bad_request
from rpcerrors.core.predefined import with_cancelled
from rpcerrors.core.predefined import with_data_loss
from rpcerrors.core.predefined import with_deadline_exceeded
from rpcerrors.core.predefined import with_failed_precondition
from rpcerrors.core.predefined import with_internal
from rpcerrors.core.predefined import with_not_found
from rpcerrors.core.predefined import with_out_of_range
from rpcerrors.core.predefined import with_permission_denied
from rpcerrors.core.predefined import with_resource_exhausted
from rpcerrors.core.predefined import with_unauthenticated
from rpcerrors.core.predefined import with_unavailable
from rpcerrors.core.predefined import with_unimplemented
from rpcerrors.core.predefined import with_unknown
from rpcerrors.core.projection import details_of
from rpcerrors.core.projection import flatten
from rpcerrors.core.projection import has_status
from rpcerrors.core.projection import iter_chain
from rpcerrors.core.projection import status_of
from rpcerrors.core.projection import temporary
from rpcerrors.core.projection import unwrap
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError
from rpcerrors.core.status import code_from_name
from rpcerrors.core.status import format_code
from rpcerrors.core.status import http_of
from rpcerrors.core.status import name_of
from rpcerrors.core.status import retryable
from rpcerrors.core.status import valid
from rpcerrors.schemas.details import AnyDetail
from rpcerrors.schemas.details import BadRequest
from rpcerrors.schemas.details import DebugInfo
from rpcerrors.schemas.details import Detail
from rpcerrors.schemas.details import ErrorInfo
from rpcerrors.schemas.details import FieldViolation
from rpcerrors.schemas.details import Help
from rpcerrors.schemas.details import Link
from rpcerrors.schemas.details import LocalizedMessage
from rpcerrors.schemas.details import PreconditionFailure
from rpcerrors.schemas.details import QuotaFailure
from rpcerrors.schemas.details import QuotaViolation
from rpcerrors.schemas.details import RequestInfo
from rpcerrors.schemas.details import ResourceInfo
from rpcerrors.schemas.details import TypedViolation
from rpcerrors.transport.adapter import StatusAdapter
from rpcerrors.transport.adapter import new_session

__version__ = "0.1.0"

__all__ = [
    "AnnotatedError",
    "Annotation",
    "AnyDetail",
    "BadRequest",
    "DebugInfo",
    "Decoder",
    "Detail",
    "Encoder",
    "ErrorDecodeError",
    "ErrorInfo",
    "FieldViolation",
    "Help",
    "Link",
    "LocalizedMessage",
    "Message",
    "Modifier",
    "PreconditionFailure",
    "QuotaFailure",
    "QuotaViolation",
    "RequestInfo",
    "ResourceInfo",
    "StackTrace",
    "StatusAdapter",
    "StatusCode",
    "StatusError",
    "TypedViolation",
    "annotate",
    "code_from_name",
    "decode",
    "default_encoder",
    "details_of",
    "encode",
    "flatten",
    "format_code",
    "has_status",
    "hide_debug_info",
    "http_of",
    "iter_chain",
    "lookup",
    "name_of",
    "new_session",
    "register",
    "registered_types",
    "retryable",
    "status_of",
    "temporary",
    "unwrap",
    "valid",
    "with_aborted",
    "with_already_exists",
    "with_bad_request",
    "with_cancelled",
    "with_data_loss",
    "with_deadline_exceeded",
    "with_failed_precondition",
    "with_internal",
    "with_not_found",
    "with_out_of_range",
    "with_permission_denied",
    "with_resource_exhausted",
    "with_unauthenticated",
    "with_unavailable",
    "with_unimplemented",
    "with_unknown",
]
