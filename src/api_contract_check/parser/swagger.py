"""OpenAPI / Swagger document parser.

Parses OpenAPI 3.x and Swagger 2.0 documents into Operation models.
Schema references are not resolved.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import FORM_URLENCODED, MULTIPART_FORM_DATA, ActionType, MimeBody, Operation, Param

FORM_MEDIA_TYPES = (FORM_URLENCODED, MULTIPART_FORM_DATA)

# Contract keyword -> Param field
VALIDATION_KEYS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minimum": "minimum",
    "maximum": "maximum",
    "pattern": "pattern",
}


class ContractParseError(ValueError):
    """Raised when a document is not a usable OpenAPI/Swagger description."""


def parse_openapi(file_path: Path) -> list[Operation]:
    """Parse an OpenAPI/Swagger file into a list of Operation."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ContractParseError(f"{file_path}: {e}") from e
    return parse_openapi_document(doc)


def parse_openapi_document(doc: dict) -> list[Operation]:
    """Parse an already loaded OpenAPI/Swagger document."""
    if not isinstance(doc, dict) or not ("openapi" in doc or "swagger" in doc):
        raise ContractParseError("Document is not an OpenAPI/Swagger description")
    paths = doc.get("paths")
    if not isinstance(paths, dict):
        raise ContractParseError("Document has no 'paths' mapping")

    swagger2 = "swagger" in doc
    operations = []
    for path, methods in paths.items():
        if not isinstance(methods, dict):
            continue
        shared_params = methods.get("parameters") or []
        for method, operation in methods.items():
            if method.upper() not in ActionType.__members__ or not isinstance(operation, dict):
                continue
            try:
                operations.append(_parse_operation(doc, path, method, operation, shared_params, swagger2))
            except ValidationError as e:
                raise ContractParseError(f"{method.upper()} {path}: {e}") from e

    return operations


def _parse_operation(
    doc: dict, path: str, method: str, operation: dict, shared_params: list[dict], swagger2: bool
) -> Operation:
    params = _merge_parameters(shared_params, operation.get("parameters") or [])
    query_params = {
        p["name"]: _parse_param(p, "query", swagger2)
        for p in params
        if p.get("in") == "query"
    }
    if swagger2:
        body = _parse_form_data(params, operation.get("consumes") or doc.get("consumes") or [])
    else:
        body = _parse_request_body(operation.get("requestBody"))

    return Operation(
        kind=ActionType[method.upper()],
        resource=path,
        query_parameters=query_params or None,
        body=body,
    )


def _merge_parameters(shared: list[dict], own: list[dict]) -> list[dict]:
    """Path-level parameters apply unless the operation redeclares them."""
    merged = {}
    for p in [*shared, *own]:
        if isinstance(p, dict) and "name" in p:
            merged[(p["name"], p.get("in"))] = p
    return list(merged.values())


def _parse_param(p: dict, location: str, swagger2: bool) -> Param:
    # Swagger 2.0 puts type and validation on the parameter itself
    schema = p if swagger2 else p.get("schema") or {}
    return _build_param(p["name"], location, p.get("required", False), schema)


def _build_param(name: str, location: str, required: bool, schema: dict) -> Param:
    return Param(
        name=name,
        location=location,
        required=required,
        param_type=_schema_type(schema.get("type")),
        **{field: schema[key] for key, field in VALIDATION_KEYS.items() if key in schema},
    )


def _schema_type(value) -> str | None:
    # OpenAPI 3.1 allows a list of types, e.g. [string, "null"]
    if isinstance(value, list):
        return next((t for t in value if t != "null"), None)
    return value


def _parse_request_body(body: dict | None) -> dict[str, MimeBody] | None:
    if not body:
        return None
    content = body.get("content") or {}
    result = {}
    for media_type, ct_data in content.items():
        form_params = None
        if media_type in FORM_MEDIA_TYPES:
            form_params = _schema_properties((ct_data or {}).get("schema") or {})
        result[media_type] = MimeBody(media_type=media_type, form_parameters=form_params)
    return result or None


def _schema_properties(schema: dict) -> dict[str, Param]:
    required = set(schema.get("required") or [])
    return {
        name: _build_param(name, "form", name in required, prop or {})
        for name, prop in (schema.get("properties") or {}).items()
    }


def _parse_form_data(params: list[dict], consumes: list[str]) -> dict[str, MimeBody] | None:
    form_params = {
        p["name"]: _build_param(p["name"], "form", p.get("required", False), p)
        for p in params
        if p.get("in") == "formData"
    }
    if not form_params:
        return None
    media_type = MULTIPART_FORM_DATA if MULTIPART_FORM_DATA in consumes else FORM_URLENCODED
    return {media_type: MimeBody(media_type=media_type, form_parameters=form_params)}
