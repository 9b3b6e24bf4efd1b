"""
Declarative request validation.

A ValidationSchema lists FieldRules per input source (query string, path
parameters, body). Rules run in declaration order and every failure is
collected, so a client sees the complete list of problems in one response.
Errors read "<source>.<field> <reason>".
"""
import math
import re
from datetime import date, datetime
from typing import Any, Callable, List, Literal, Mapping, Optional, Tuple, Union

from fastapi import Request
from pydantic import BaseModel, Field

FieldType = Literal["string", "number", "boolean", "date"]
Number = Union[int, float]


class FieldRule(BaseModel):
    field: str
    type: FieldType
    required: bool = False
    min: Optional[Number] = None
    max: Optional[Number] = None
    pattern: Optional[str] = None
    enum: Optional[List[str]] = None
    integer: bool = False


class ValidationSchema(BaseModel):
    query: List[FieldRule] = Field(default_factory=list)
    params: List[FieldRule] = Field(default_factory=list)
    body: List[FieldRule] = Field(default_factory=list)
    # (source, earlier field, later field)
    ordering: List[Tuple[str, str, str]] = Field(default_factory=list)


class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class RequestValidationFailed(Exception):
    """Raised by the validation dependency; rendered as a 400 envelope."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Validation failed: {', '.join(errors)}")


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        pass
    try:
        return datetime.combine(date.fromisoformat(text), datetime.min.time())
    except ValueError:
        return None


def _check_number(rule: FieldRule, value: Any, name: str, errors: List[str]) -> None:
    number = _parse_number(value)
    if number is None:
        errors.append(f"{name} must be a number")
        return
    if rule.integer and not number.is_integer():
        errors.append(f"{name} must be an integer")
    if rule.min is not None and number < rule.min:
        errors.append(f"{name} must be at least {rule.min}")
    if rule.max is not None and number > rule.max:
        errors.append(f"{name} must be at most {rule.max}")


def _check_string(rule: FieldRule, value: Any, name: str, errors: List[str]) -> None:
    if not isinstance(value, str):
        errors.append(f"{name} must be a string")
        return
    if rule.min is not None and len(value) < rule.min:
        errors.append(f"{name} must be at least {rule.min} characters")
    if rule.max is not None and len(value) > rule.max:
        errors.append(f"{name} must be at most {rule.max} characters")
    if rule.pattern and not re.search(rule.pattern, value):
        errors.append(f"{name} format is invalid")
    if rule.enum and value not in rule.enum:
        errors.append(f"{name} must be one of: {', '.join(rule.enum)}")


def validate_fields(data: Mapping[str, Any], rules: List[FieldRule], source: str) -> List[str]:
    errors: List[str] = []
    for rule in rules:
        name = f"{source}.{rule.field}"
        value = data.get(rule.field)

        if _is_absent(value):
            if rule.required:
                errors.append(f"{name} is required")
            continue

        if rule.type == "number":
            _check_number(rule, value, name, errors)
        elif rule.type == "boolean":
            if not isinstance(value, bool) and value not in ("true", "false"):
                errors.append(f"{name} must be a boolean")
        elif rule.type == "date":
            if _parse_date(value) is None:
                errors.append(f"{name} must be a valid date")
        elif rule.type == "string":
            _check_string(rule, value, name, errors)
    return errors


def _comparable(value: Any) -> Union[float, datetime, None]:
    number = _parse_number(value)
    if number is not None:
        return number
    return _parse_date(value)


def _check_ordering(sources: Mapping[str, Mapping[str, Any]], ordering, errors: List[str]) -> None:
    for source, earlier, later in ordering:
        data = sources.get(source) or {}
        first, second = data.get(earlier), data.get(later)
        if _is_absent(first) or _is_absent(second):
            continue
        first_value, second_value = _comparable(first), _comparable(second)
        if first_value is None or second_value is None or type(first_value) is not type(second_value):
            continue
        if first_value > second_value:
            errors.append(f"{source}.{earlier} must not be after {source}.{later}")


def validate(
    schema: ValidationSchema,
    query: Optional[Mapping[str, Any]] = None,
    params: Optional[Mapping[str, Any]] = None,
    body: Optional[Mapping[str, Any]] = None,
) -> ValidationResult:
    sources = {"query": query or {}, "params": params or {}, "body": body or {}}
    errors: List[str] = []
    errors.extend(validate_fields(sources["query"], schema.query, "query"))
    errors.extend(validate_fields(sources["params"], schema.params, "params"))
    errors.extend(validate_fields(sources["body"], schema.body, "body"))
    _check_ordering(sources, schema.ordering, errors)
    return ValidationResult(is_valid=not errors, errors=errors)


def validate_request(schema: ValidationSchema) -> Callable:
    """FastAPI dependency that rejects the request before the handler runs."""

    async def dependency(request: Request) -> None:
        result = validate(schema, query=request.query_params, params=request.path_params)
        if not result.is_valid:
            raise RequestValidationFailed(result.errors)

    return dependency


def _year_rule(name: str) -> FieldRule:
    return FieldRule(field=name, type="number", min=1900, max=datetime.now().year, integer=True)


ROVER_RULE = FieldRule(
    field="rover", type="string", required=True,
    enum=["curiosity", "opportunity", "spirit", "perseverance"],
)

SCHEMAS = {
    "apod": ValidationSchema(
        query=[
            FieldRule(field="date", type="date"),
            FieldRule(field="start_date", type="date"),
            FieldRule(field="end_date", type="date"),
            FieldRule(field="count", type="number", min=1, max=100, integer=True),
            FieldRule(field="thumbs", type="boolean"),
        ],
        ordering=[("query", "start_date", "end_date")],
    ),
    "mars_rover": ValidationSchema(
        params=[ROVER_RULE],
        query=[
            FieldRule(field="sol", type="number", min=0, integer=True),
            FieldRule(field="earth_date", type="date"),
            FieldRule(field="camera", type="string"),
            FieldRule(field="page", type="number", min=1, integer=True),
        ],
    ),
    "epic": ValidationSchema(
        query=[
            FieldRule(field="date", type="date"),
            FieldRule(field="identifier", type="string"),
            FieldRule(field="image", type="string"),
            FieldRule(field="enhanced", type="boolean"),
        ],
    ),
    "epic_image_url": ValidationSchema(
        query=[
            FieldRule(field="identifier", type="string", required=True),
            FieldRule(field="date", type="date", required=True),
            FieldRule(field="image", type="string", required=True),
            FieldRule(field="enhanced", type="boolean"),
        ],
    ),
    "neo": ValidationSchema(
        query=[
            FieldRule(field="start_date", type="date"),
            FieldRule(field="end_date", type="date"),
            FieldRule(field="asteroid_id", type="string"),
        ],
        ordering=[("query", "start_date", "end_date")],
    ),
    "neo_by_size": ValidationSchema(
        query=[
            FieldRule(field="min_km", type="number", required=True, min=0),
            FieldRule(field="max_km", type="number", required=True, min=0),
            FieldRule(field="start_date", type="date"),
            FieldRule(field="end_date", type="date"),
        ],
        ordering=[("query", "min_km", "max_km"), ("query", "start_date", "end_date")],
    ),
    "neo_lookup": ValidationSchema(
        params=[FieldRule(field="asteroid_id", type="string", required=True, pattern=r"^\d+$")],
    ),
    "image_search": ValidationSchema(
        query=[
            FieldRule(field="q", type="string", max=200),
            FieldRule(field="center", type="string"),
            FieldRule(field="description", type="string", max=500),
            FieldRule(field="keywords", type="string", max=200),
            FieldRule(field="location", type="string"),
            FieldRule(field="nasa_id", type="string"),
            FieldRule(field="photographer", type="string"),
            FieldRule(field="title", type="string", max=200),
            _year_rule("year_start"),
            _year_rule("year_end"),
            FieldRule(field="media_type", type="string", enum=["image", "video", "audio"]),
            FieldRule(field="page", type="number", min=1, integer=True),
        ],
        ordering=[("query", "year_start", "year_end")],
    ),
}
