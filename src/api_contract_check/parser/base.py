"""Unified data models for parsed API contracts.

Parsers convert their input into these standard models; checkers read
them and never modify them.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"


class ActionType(str, Enum):
    """HTTP operation kind."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


BODY_ACTIONS = frozenset({ActionType.POST, ActionType.PUT, ActionType.PATCH})


def supports_request_body(kind: ActionType) -> bool:
    """Whether a request body is meaningful for this kind of operation."""
    return kind in BODY_ACTIONS


class Param(BaseModel):
    """A single declared parameter (query, form, path, or header)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str = "query"  # query / form / path / header
    required: bool = False
    param_type: str | None = None  # string / integer / number / boolean / date
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    pattern: str | None = None


class MimeBody(BaseModel):
    """Request body for one media type."""

    model_config = ConfigDict(frozen=True)

    media_type: str
    form_parameters: dict[str, Param] | None = None


class Operation(BaseModel):
    """A single API operation with the metadata checkers compare."""

    model_config = ConfigDict(frozen=True)

    kind: ActionType
    resource: str  # /api/users/{id}
    query_parameters: dict[str, Param] | None = None
    body: dict[str, MimeBody] | None = None

    @property
    def key(self) -> str:
        return f"{self.kind.value} {self.resource}"

    def form_parameter(self, media_type: str, name: str) -> Param | None:
        """Look up a form parameter declared under the given body media type."""
        if not self.body:
            return None
        mime = self.body.get(media_type)
        if mime is None or not mime.form_parameters:
            return None
        return mime.form_parameters.get(name)
