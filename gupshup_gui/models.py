"""Domain models exchanged with the partner API and the HTTP clients."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _load(cls: type, data: Any, keys: Mapping[str, str]) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")
    return {attr: data[key] for attr, key in keys.items() if data.get(key) is not None}


def _dump(obj: Any, keys: Mapping[str, str], omit_empty: frozenset[str] = frozenset()) -> dict:
    out: dict[str, Any] = {}
    for attr, key in keys.items():
        value = getattr(obj, attr)
        if attr in omit_empty and not value:
            continue
        out[key] = list(value) if isinstance(value, list) else value
    return out


@dataclass
class Partner:
    """Partner account credentials."""

    email: str
    password: str


@dataclass
class TokenCache:
    """Partner access token and its expiry as a Unix timestamp."""

    token: str
    expires_at: int

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "expires_at": self.expires_at}


@dataclass
class PartnerAppToken:
    """Access token of one partner app."""

    app_id: str = ""
    token: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"AppID": self.app_id, "Token": self.token}


_APP_KEYS = {
    "id": "id",
    "name": "name",
    "phone": "phone",
    "customer_id": "customerId",
    "live": "live",
    "partner_id": "partnerId",
    "created_on": "createdOn",
    "modified_on": "modifiedOn",
    "partner_created": "partnerCreated",
    "cxp_enabled": "cxpEnabled",
    "partner_usage": "partnerUsage",
    "stopped": "stopped",
    "healthy": "healthy",
    "cap": "cap",
}


@dataclass
class PartnerApp:
    id: str = ""
    name: str = ""
    phone: str = ""
    customer_id: str = ""
    live: bool = False
    partner_id: int = 0
    created_on: int = 0
    modified_on: int = 0
    partner_created: bool = False
    cxp_enabled: bool = False
    partner_usage: bool = False
    stopped: bool = False
    healthy: bool = False
    cap: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PartnerApp:
        return cls(**_load(cls, data, _APP_KEYS))

    def to_dict(self) -> dict[str, Any]:
        return _dump(self, _APP_KEYS, frozenset({"phone"}))


@dataclass
class PartnerAppsResponse:
    status: str = ""
    partner_apps_list: list[PartnerApp] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PartnerAppsResponse:
        fields = _load(cls, data, {"status": "status", "partner_apps_list": "partnerAppsList"})
        apps = [PartnerApp.from_dict(item) for item in fields.pop("partner_apps_list", [])]
        return cls(partner_apps_list=apps, **fields)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "partnerAppsList": [app.to_dict() for app in self.partner_apps_list],
        }


_META_KEYS = {"example": "example", "media_id": "mediaId", "media_url": "mediaUrl"}


@dataclass
class Meta:
    example: str = ""
    media_id: str = ""
    media_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Meta:
        return cls(**_load(cls, data, _META_KEYS))

    def to_dict(self) -> dict[str, Any]:
        return _dump(self, _META_KEYS, frozenset({"media_id", "media_url"}))


_CONTAINER_META_KEYS = {
    "app_id": "appId",
    "data": "data",
    "sample_text": "sampleText",
    "enable_sample": "enableSample",
    "media_id": "mediaId",
    "media_url": "mediaUrl",
    "edit_template": "editTemplate",
    "allow_template_category_change": "allowTemplateCategoryChange",
    "add_security_recommendation": "addSecurityRecommendation",
    "correct_category": "correctCategory",
}


@dataclass
class ContainerMeta:
    app_id: str = ""
    data: str = ""
    sample_text: str = ""
    enable_sample: bool = False
    media_id: str = ""
    media_url: str = ""
    edit_template: bool = False
    allow_template_category_change: bool = False
    add_security_recommendation: bool = False
    correct_category: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ContainerMeta:
        return cls(**_load(cls, data, _CONTAINER_META_KEYS))

    def to_dict(self) -> dict[str, Any]:
        return _dump(
            self,
            _CONTAINER_META_KEYS,
            frozenset({"media_id", "media_url", "correct_category"}),
        )


_TEMPLATE_KEYS = {
    "id": "id",
    "app_id": "appId",
    "element_name": "elementName",
    "category": "category",
    "template_type": "templateType",
    "status": "status",
    "language_code": "languageCode",
    "namespace": "namespace",
    "external_id": "externalId",
    "data": "data",
    "vertical": "vertical",
    "modified_on": "modifiedOn",
    "created_on": "createdOn",
    "meta": "meta",
    "container_meta": "containerMeta",
    "waba_id": "wabaId",
    "language_policy": "languagePolicy",
    "priority": "priority",
    "stage": "stage",
    "retry": "retry",
    "quality": "quality",
    "internal_type": "internalType",
    "internal_category": "internalCategory",
    "button_supported": "buttonSupported",
    "buttons": "buttons",
}


@dataclass
class PartnerTemplate:
    """A message template as reported by the partner API.

    ``meta`` and ``container_meta`` hold the raw JSON values untouched.
    """

    id: str = ""
    app_id: str = ""
    element_name: str = ""
    category: str = ""
    template_type: str = ""
    status: str = ""
    language_code: str = ""
    namespace: str = ""
    external_id: str = ""
    data: str = ""
    vertical: str = ""
    modified_on: int = 0
    created_on: int = 0
    meta: Any = None
    container_meta: Any = None
    waba_id: str = ""
    language_policy: str = ""
    priority: int = 0
    stage: str = ""
    retry: int = 0
    quality: str = ""
    internal_type: int = 0
    internal_category: int = 0
    button_supported: str = ""
    buttons: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PartnerTemplate:
        return cls(**_load(cls, data, _TEMPLATE_KEYS))

    def to_dict(self) -> dict[str, Any]:
        return _dump(self, _TEMPLATE_KEYS, frozenset({"button_supported", "buttons"}))


_CARD_BUTTON_KEYS = {
    "type": "type",
    "text": "text",
    "url": "url",
    "button_value": "buttonValue",
    "suffix": "suffix",
}


@dataclass
class CardButton:
    type: str = ""
    text: str = ""
    url: str = ""
    button_value: str = ""
    suffix: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CardButton:
        return cls(**_load(cls, data, _CARD_BUTTON_KEYS))

    def to_dict(self) -> dict[str, Any]:
        return _dump(self, _CARD_BUTTON_KEYS, frozenset({"url", "button_value", "suffix"}))


_CARD_KEYS = {
    "header_type": "headerType",
    "media_url": "mediaUrl",
    "media_id": "mediaId",
    "example_media": "exampleMedia",
    "body": "body",
    "sample_text": "sampleText",
    "buttons": "buttons",
}


@dataclass
class Card:
    """One card of a carousel template."""

    header_type: str = ""
    media_url: str = ""
    media_id: str = ""
    example_media: str = ""
    body: str = ""
    sample_text: str = ""
    buttons: list[CardButton] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Card:
        fields = _load(cls, data, _CARD_KEYS)
        buttons = [CardButton.from_dict(item) for item in fields.pop("buttons", [])]
        return cls(buttons=buttons, **fields)

    def to_dict(self) -> dict[str, Any]:
        out = _dump(self, _CARD_KEYS, frozenset({"media_url", "media_id", "example_media"}))
        out["buttons"] = [button.to_dict() for button in self.buttons]
        return out


_TEMPLATE_BUTTON_KEYS = {
    "type": "type",
    "text": "text",
    "phone_number": "phone_number",
    "url": "url",
    "example": "example",
    "otp_type": "otp_type",
    "autofill_text": "autofill_text",
    "package_name": "package_name",
    "signature_hash": "signature_hash",
}


@dataclass
class TemplateButton:
    """A template button: PHONE_NUMBER, URL, QUICK_REPLY, COPY_CODE or OTP."""

    type: str = ""
    text: str = ""
    phone_number: str = ""
    url: str = ""
    example: list[str] = field(default_factory=list)
    otp_type: str = ""
    autofill_text: str = ""
    package_name: str = ""
    signature_hash: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TemplateButton:
        fields = _load(cls, data, _TEMPLATE_BUTTON_KEYS)
        if "example" in fields:
            fields["example"] = list(fields["example"])
        return cls(**fields)

    def to_dict(self) -> dict[str, Any]:
        return _dump(
            self,
            _TEMPLATE_BUTTON_KEYS,
            frozenset(_TEMPLATE_BUTTON_KEYS) - {"type", "text"},
        )


_CREATE_REQUEST_KEYS = {
    "element_name": "elementName",
    "vertical": "vertical",
    "language_code": "languageCode",
    "category": "category",
    "template_type": "templateType",
    "cards": "cards",
    "is_lto": "isLTO",
    "limited_offer_text": "limitedOfferText",
    "has_expiration": "hasExpiration",
    "header": "header",
    "content": "content",
    "footer": "footer",
    "buttons": "buttons",
    "example": "example",
    "example_media": "exampleMedia",
    "example_header": "exampleHeader",
    "enable_sample": "enableSample",
    "allow_template_category_change": "allowTemplateCategoryChange",
    "add_security_recommendation": "addSecurityRecommendation",
    "code_expiration_minutes": "codeExpirationMinutes",
}

_CREATE_REQUEST_OMIT = frozenset(
    {
        "cards",
        "is_lto",
        "limited_offer_text",
        "has_expiration",
        "header",
        "footer",
        "buttons",
        "add_security_recommendation",
        "code_expiration_minutes",
    }
)


@dataclass
class TemplateCreateRequest:
    """Everything needed to create a message template."""

    element_name: str = ""
    vertical: str = ""
    language_code: str = ""
    category: str = ""
    template_type: str = ""
    cards: list[Card] = field(default_factory=list)
    is_lto: bool = False
    limited_offer_text: str = ""
    has_expiration: bool = False
    header: str = ""
    content: str = ""
    footer: str = ""
    buttons: list[TemplateButton] = field(default_factory=list)
    example: str = ""
    example_media: list[str] = field(default_factory=list)
    example_header: str = ""
    enable_sample: bool = False
    allow_template_category_change: bool = False
    add_security_recommendation: bool = False
    code_expiration_minutes: int = 0

    def to_dict(self) -> dict[str, Any]:
        out = _dump(self, _CREATE_REQUEST_KEYS, _CREATE_REQUEST_OMIT)
        if "cards" in out:
            out["cards"] = [card.to_dict() for card in self.cards]
        if "buttons" in out:
            out["buttons"] = [button.to_dict() for button in self.buttons]
        return out


@dataclass
class TemplateResponse:
    status: str = ""
    templates: list[PartnerTemplate] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TemplateResponse:
        fields = _load(cls, data, {"status": "status", "templates": "templates"})
        templates = [PartnerTemplate.from_dict(item) for item in fields.pop("templates", [])]
        return cls(templates=templates, **fields)