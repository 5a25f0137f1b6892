"""Request payload binding and validation for the HTTP handlers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple

from .models import Card, PartnerAppToken, TemplateButton, TemplateCreateRequest


class BindingError(ValueError):
    """A request body that could not be decoded or failed validation.

    ``violations`` lists ``(field, tag, value)`` for each failed rule.
    """

    def __init__(self, message: str, violations: Iterable[tuple[str, str, Any]] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.violations = tuple(violations)

    def __str__(self) -> str:
        return self.message


@dataclass
class AppIdInput:
    app_id: str

    def to_app_token(self) -> PartnerAppToken:
        return PartnerAppToken(app_id=self.app_id)


class _Field(NamedTuple):
    attr: str
    key: str
    name: str
    kind: str


_FIELDS = (
    _Field("element_name", "elementName", "ElementName", "string"),
    _Field("vertical", "vertical", "Vertical", "string"),
    _Field("language_code", "languageCode", "LanguageCode", "string"),
    _Field("category", "category", "Category", "string"),
    _Field("template_type", "templateType", "TemplateType", "string"),
    _Field("example_media", "images", "ExampleMedia", "strings"),
    _Field("header", "header", "Header", "string"),
    _Field("content", "content", "Content", "string"),
    _Field("footer", "footer", "Footer", "string"),
    _Field("buttons", "buttons", "Buttons", "buttons"),
    _Field("example", "example", "Example", "string"),
    _Field("example_header", "exampleHeader", "ExampleHeader", "string"),
    _Field("is_lto", "isLTO", "IsLTO", "bool"),
    _Field("limited_offer_text", "limitedOfferText", "LimitedOfferText", "string"),
    _Field("has_expiration", "hasExpiration", "HasExpiration", "bool"),
    _Field("cards", "cards", "Cards", "cards"),
    _Field("code_expiration_minutes", "codeExpirationMinutes", "CodeExpirationMinutes", "int"),
    _Field(
        "add_security_recommendation",
        "addSecurityRecommendation",
        "AddSecurityRecommendation",
        "bool",
    ),
)

_TYPE_NAMES = {
    "string": "string",
    "bool": "bool",
    "int": "int",
    "strings": "[]string",
    "buttons": "[]template.TemplateButton",
    "cards": "[]template.Card",
}

_RULES: dict[str, tuple[tuple[str, int | None], ...]] = {
    "element_name": (("required", None),),
    "vertical": (("required", None), ("min", 3), ("max", 70)),
    "language_code": (("required", None),),
    "category": (("required", None),),
    "template_type": (("required", None),),
    "content": (("required", None),),
}

_STRUCT = "CreateTemplateInput"


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _type_error(value: Any, key: str, type_name: str) -> BindingError:
    return BindingError(
        f"json: cannot unmarshal {_json_type(value)} into field "
        f"{_STRUCT}.{key} of type {type_name}"
    )


def _match_field(key: str) -> _Field | None:
    for spec in _FIELDS:
        if spec.key == key:
            return spec
    folded = key.casefold()
    for spec in _FIELDS:
        if spec.key.casefold() == folded:
            return spec
    return None


def _convert(spec: _Field, value: Any) -> Any:
    kind = spec.kind
    if kind == "string":
        if not isinstance(value, str):
            raise _type_error(value, spec.key, "string")
        return value
    if kind == "bool":
        if not isinstance(value, bool):
            raise _type_error(value, spec.key, "bool")
        return value
    if kind == "int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise _type_error(value, spec.key, "int")
        return value
    if not isinstance(value, list):
        raise _type_error(value, spec.key, _TYPE_NAMES[kind])
    if kind == "strings":
        items = []
        for item in value:
            if item is None:
                items.append("")
            elif isinstance(item, str):
                items.append(item)
            else:
                raise _type_error(item, spec.key, "string")
        return items
    element_type, element_name = (
        (TemplateButton, "template.TemplateButton")
        if kind == "buttons"
        else (Card, "template.Card")
    )
    converted = []
    for item in value:
        if not isinstance(item, Mapping):
            raise _type_error(item, spec.key, element_name)
        converted.append(element_type.from_dict(item))
    return converted


def _decode(data: Any) -> Mapping[str, Any]:
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    if isinstance(data, str):
        if not data.strip():
            raise BindingError("EOF")
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise BindingError(str(exc)) from exc
    if not isinstance(data, Mapping):
        raise BindingError(
            f"json: cannot unmarshal {_json_type(data)} into value of type {_STRUCT}"
        )
    return data


def _violation_message(field_name: str, tag: str) -> str:
    return (
        f"Key: '{_STRUCT}.{field_name}' Error:Field validation for "
        f"'{field_name}' failed on the '{tag}' tag"
    )


@dataclass
class CreateTemplateInput:
    """Body of a template creation request, as sent by clients."""

    element_name: str = ""
    vertical: str = ""
    language_code: str = ""
    category: str = ""
    template_type: str = ""
    example_media: list[str] = field(default_factory=list)
    header: str = ""
    content: str = ""
    footer: str = ""
    buttons: list[TemplateButton] = field(default_factory=list)
    example: str = ""
    example_header: str = ""
    is_lto: bool = False
    limited_offer_text: str = ""
    has_expiration: bool = False
    cards: list[Card] = field(default_factory=list)
    code_expiration_minutes: int = 0
    add_security_recommendation: bool = False

    @classmethod
    def from_json(cls, data: Any) -> CreateTemplateInput:
        """Decode a JSON body (text, bytes or parsed object) and validate it.

        Raises BindingError on malformed JSON, wrong value types or failed rules.
        """
        payload = _decode(data)
        values: dict[str, Any] = {}
        for key, raw in payload.items():
            spec = _match_field(key)
            if spec is None or raw is None:
                continue
            values[spec.attr] = _convert(spec, raw)
        instance = cls(**values)
        violations = list(instance._violations())
        if violations:
            message = "\n".join(_violation_message(name, tag) for name, tag, _ in violations)
            raise BindingError(message, violations)
        return instance

    def _violations(self):
        for spec in _FIELDS:
            value = getattr(self, spec.attr)
            if spec.attr == "example_media":
                for position, item in enumerate(value):
                    if not item:
                        yield f"{spec.name}[{position}]", "required", item
                continue
            for tag, limit in _RULES.get(spec.attr, ()):
                if tag == "required" and not value:
                    yield spec.name, tag, value
                    break
                if tag == "min" and len(value) < limit:
                    yield spec.name, tag, value
                    break
                if tag == "max" and len(value) > limit:
                    yield spec.name, tag, value
                    break

    def to_create_request(self) -> TemplateCreateRequest:
        return TemplateCreateRequest(
            element_name=self.element_name,
            vertical=self.vertical,
            language_code=self.language_code,
            category=self.category,
            template_type=self.template_type,
            example_media=list(self.example_media),
            header=self.header,
            content=self.content,
            footer=self.footer,
            buttons=list(self.buttons),
            example=self.example,
            example_header=self.example_header,
            is_lto=self.is_lto,
            limited_offer_text=self.limited_offer_text,
            has_expiration=self.has_expiration,
            cards=list(self.cards),
            code_expiration_minutes=self.code_expiration_minutes,
            add_security_recommendation=self.add_security_recommendation,
            enable_sample=True,
            allow_template_category_change=True,
        )