"""Pydantic models for the typed error detail payloads."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING
from typing import Any
from typing import ClassVar
from typing import Protocol
from typing import runtime_checkable

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

if TYPE_CHECKING:
    from rpcerrors.core.errors import Modifier

TYPE_URL_PREFIX = "type.googleapis.com/google.rpc."
TYPE_URL_DEBUG_INFO = TYPE_URL_PREFIX + "DebugInfo"
TYPE_URL_RESOURCE_INFO = TYPE_URL_PREFIX + "ResourceInfo"
TYPE_URL_BAD_REQUEST = TYPE_URL_PREFIX + "BadRequest"
TYPE_URL_PRECONDITION_FAILURE = TYPE_URL_PREFIX + "PreconditionFailure"
TYPE_URL_ERROR_INFO = TYPE_URL_PREFIX + "ErrorInfo"
TYPE_URL_QUOTA_FAILURE = TYPE_URL_PREFIX + "QuotaFailure"
TYPE_URL_REQUEST_INFO = TYPE_URL_PREFIX + "RequestInfo"
TYPE_URL_HELP = TYPE_URL_PREFIX + "Help"
TYPE_URL_LOCALIZED_MESSAGE = TYPE_URL_PREFIX + "LocalizedMessage"

TYPE_KEY = "@type"


@runtime_checkable
class Detail(Protocol):
    """Anything carrying a type-url can travel as an error detail."""

    def type_url(self) -> str: ...


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class DetailModel(_WireModel):
    """Base class for built-in details; subclasses set `TYPE_URL`."""

    TYPE_URL: ClassVar[str] = ""

    def type_url(self) -> str:
        return self.TYPE_URL

    def annotate(self, modifier: Modifier) -> None:
        modifier.append_details(self)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON object for this detail with `@type` leading."""
        payload: dict[str, Any] = {TYPE_KEY: self.type_url()}
        payload.update(self.model_dump(mode="json", by_alias=True, exclude_defaults=True))
        return payload

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}"]
        for name in type(self).model_fields:
            lines.append(f"{name}: {getattr(self, name)!r}")
        return lines


class DebugInfo(DetailModel):
    """Stack entries captured at the failure site plus free-form detail."""

    TYPE_URL: ClassVar[str] = TYPE_URL_DEBUG_INFO

    stack_entries: list[str] = Field(default_factory=list)
    detail: str = ""

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}", f"detail: {self.detail!r}", "stack:"]
        lines.extend(f"\t{entry}" for entry in self.stack_entries)
        return lines

    def __str__(self) -> str:
        return self.detail


class ResourceInfo(DetailModel):
    """Describes the resource being accessed."""

    TYPE_URL: ClassVar[str] = TYPE_URL_RESOURCE_INFO

    resource_type: str = ""
    resource_name: str = ""
    owner: str = ""
    description: str = ""

    def __str__(self) -> str:
        return (
            f"resource type: {self.resource_type}, name: {self.resource_name}, "
            f"owner: {self.owner}, description: {self.description}"
        )


class FieldViolation(_WireModel):
    field: str = ""
    description: str = ""


class BadRequest(DetailModel):
    """Violations in a client request."""

    TYPE_URL: ClassVar[str] = TYPE_URL_BAD_REQUEST

    field_violations: list[FieldViolation] = Field(default_factory=list)

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}", "field_violations:"]
        lines.extend(f"\t{item.field}: {item.description!r}" for item in self.field_violations)
        return lines

    def __str__(self) -> str:
        return f"field violations: {len(self.field_violations)}"


class TypedViolation(_WireModel):
    type: str = ""
    subject: str = ""
    description: str = ""


class PreconditionFailure(DetailModel):
    """Preconditions that were not met."""

    TYPE_URL: ClassVar[str] = TYPE_URL_PRECONDITION_FAILURE

    violations: list[TypedViolation] = Field(default_factory=list)

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}", "violations:"]
        lines.extend(
            f"\t[{item.type}] {item.subject}: {item.description!r}" for item in self.violations
        )
        return lines

    def __str__(self) -> str:
        return f"violations: {len(self.violations)}"


class ErrorInfo(DetailModel):
    """Structured reason for the error within a domain."""

    TYPE_URL: ClassVar[str] = TYPE_URL_ERROR_INFO

    reason: str = ""
    domain: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)

    def verbose_lines(self) -> list[str]:
        lines = [
            f"type: {self.type_url()!r}",
            f"reason: {self.reason!r}",
            f"domain: {self.domain!r}",
            "metadata:",
        ]
        lines.extend(f"\t{key}: {value!r}" for key, value in self.metadata.items())
        return lines

    def __str__(self) -> str:
        return f"[{self.domain}] {self.reason}"


class QuotaViolation(_WireModel):
    subject: str = ""
    description: str = ""


class QuotaFailure(DetailModel):
    TYPE_URL: ClassVar[str] = TYPE_URL_QUOTA_FAILURE

    violations: list[QuotaViolation] = Field(default_factory=list)

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}", "violations:"]
        lines.extend(f"\t{item.subject}: {item.description!r}" for item in self.violations)
        return lines

    def __str__(self) -> str:
        return f"violations: {len(self.violations)}"


class RequestInfo(DetailModel):
    TYPE_URL: ClassVar[str] = TYPE_URL_REQUEST_INFO

    request_id: str = ""
    serving_data: str = ""

    def __str__(self) -> str:
        return self.request_id


class Link(_WireModel):
    description: str = ""
    url: str = ""


class Help(DetailModel):
    """Links to documentation for the failing call."""

    TYPE_URL: ClassVar[str] = TYPE_URL_HELP

    links: list[Link] = Field(default_factory=list)

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}", "links:"]
        lines.extend(f"\t{item.description}: {item.url!r}" for item in self.links)
        return lines

    def __str__(self) -> str:
        return f"help({len(self.links)})"


class LocalizedMessage(DetailModel):
    TYPE_URL: ClassVar[str] = TYPE_URL_LOCALIZED_MESSAGE

    # The wire key is `local`, not `locale`.
    local: str = ""
    message: str = ""

    def __str__(self) -> str:
        return self.message


class AnyDetail(dict):
    """Free-form detail whose `@type` entry names its type-url.

    Used for caller-defined payloads and for unknown types on decode, where
    every field of the original object is kept verbatim.
    """

    def type_url(self) -> str:
        value = self.get(TYPE_KEY)
        return "" if value is None else str(value)

    def annotate(self, modifier: Modifier) -> None:
        modifier.append_details(self)

    def to_wire(self) -> dict[str, Any]:
        return dict(self)

    def verbose_lines(self) -> list[str]:
        lines = [f"type: {self.type_url()!r}"]
        lines.extend(f"{key}: {value!r}" for key, value in self._fields())
        return lines

    def _fields(self) -> Iterator[tuple[str, Any]]:
        return ((key, value) for key, value in self.items() if key != TYPE_KEY)


BUILTIN_DETAILS: tuple[type[DetailModel], ...] = (
    DebugInfo,
    ResourceInfo,
    BadRequest,
    PreconditionFailure,
    ErrorInfo,
    QuotaFailure,
    RequestInfo,
    Help,
    LocalizedMessage,
)


def _public_fields(value: Any) -> Any:
    try:
        fields = vars(value)
    except TypeError:
        return str(value)
    return {name: field for name, field in fields.items() if not name.startswith("_")}


def detail_to_wire(detail: Any) -> dict[str, Any]:
    """Serialize any supported detail into its JSON object form.

    Caller-defined details that are neither models nor mappings are dumped
    field by field (dataclasses, then public instance attributes). A value
    that does not dump to an object is carried under `value`.
    """
    to_wire = getattr(detail, "to_wire", None)
    if callable(to_wire):
        return to_wire()
    if isinstance(detail, BaseModel):
        payload: dict[str, Any] = {TYPE_KEY: detail.type_url()}
        payload.update(detail.model_dump(mode="json", by_alias=True, exclude_defaults=True))
        return payload
    if isinstance(detail, dict):
        return dict(detail)

    fields = to_jsonable_python(detail, fallback=_public_fields)
    payload = {TYPE_KEY: detail.type_url()}
    if isinstance(fields, dict):
        payload.update((key, value) for key, value in fields.items() if key != TYPE_KEY)
    else:
        payload["value"] = fields
    return payload


def detail_verbose_lines(detail: Any) -> list[str]:
    verbose_lines = getattr(detail, "verbose_lines", None)
    if callable(verbose_lines):
        return verbose_lines()
    return [f"type: {detail.type_url()!r}", str(detail)]
