# /app/services/catalog_helpers/form_pipeline.py

"""
The shared create/update form pipeline: normalize -> validate -> sanitize.

Every stage takes and returns the same explicit `FormContext`, so the state
of a submission travels as a value instead of living on the request. The
branch that follows (redisplay or persist) belongs to the entity services,
which know about reference lists and uniqueness rules.
"""

import html
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from ...models.form_model import FieldError


@dataclass(frozen=True)
class FormSpec:
    """Describes one entity's form: its rules and how its fields are shaped."""
    schema: Type[BaseModel]
    fields: Tuple[str, ...]
    multi_fields: Tuple[str, ...] = ()
    # Free text is stored escaped; parsed dates and enums are stored as typed.
    escape_fields: Tuple[str, ...] = ()


@dataclass
class FormContext:
    raw: Mapping[str, Any]
    entity_id: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict)
    cleaned: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def candidate(self) -> Dict[str, Any]:
        """The submitted values as they may be echoed back into a page."""
        candidate = dict(self.fields)
        if self.entity_id is not None:
            candidate["id"] = self.entity_id
        return candidate


def as_sequence(value: Any) -> List[Any]:
    """Absent -> [], a single value -> [value], a sequence -> itself as a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        # A repeated single-valued field keeps its last submission.
        value = value[-1] if value else ""
    return str(value).strip()


def normalize(ctx: FormContext, spec: FormSpec) -> FormContext:
    for name in spec.fields:
        value = ctx.raw.get(name)
        if name in spec.multi_fields:
            # An unticked placeholder checkbox posts an empty value.
            items = (str(item).strip() for item in as_sequence(value))
            ctx.fields[name] = [item for item in items if item]
        else:
            ctx.fields[name] = _as_text(value)
    return ctx


def validate(ctx: FormContext, spec: FormSpec) -> FormContext:
    """Applies every rule and keeps every violation; never stops at the first."""
    try:
        ctx.cleaned = spec.schema.model_validate(ctx.fields).model_dump()
    except ValidationError as exc:
        for error in exc.errors():
            location = error.get("loc") or ("__all__",)
            ctx.errors.append(FieldError(field=str(location[0]), message=error["msg"]))
    return ctx


def _escape(value: Any) -> Any:
    if isinstance(value, str):
        return html.escape(value, quote=True)
    if isinstance(value, list):
        return [_escape(item) for item in value]
    return value


def sanitize(ctx: FormContext, spec: FormSpec) -> FormContext:
    """
    Escapes every submitted value that may be echoed back. In the cleaned
    values only free text is escaped; parsed dates and enums stay typed.
    """
    ctx.fields = {name: _escape(value) for name, value in ctx.fields.items()}
    for name in (*spec.escape_fields, *spec.multi_fields):
        if name in ctx.cleaned:
            ctx.cleaned[name] = _escape(ctx.cleaned[name])
    return ctx


def run_form_pipeline(raw: Mapping[str, Any], spec: FormSpec, entity_id: Optional[str] = None) -> FormContext:
    ctx = FormContext(raw=raw, entity_id=entity_id)
    for stage in (normalize, validate, sanitize):
        ctx = stage(ctx, spec)
    return ctx
