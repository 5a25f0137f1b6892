import json
from urllib.parse import parse_qs

import pytest
import responses

from gupshup_gui.apps import PartnerApiError
from gupshup_gui.auth import TOKEN_KEY, LoginService, TokenStore
from gupshup_gui.models import TemplateButton, TemplateCreateRequest, TokenCache
from gupshup_gui.templates import TemplateService

BASE = "https://partner.example.com/"
APP_ID = "app-1"
TOKEN_URL = f"{BASE}partner/app/{APP_ID}/token"
TEMPLATES_URL = f"{BASE}partner/app/{APP_ID}/templates"
UPLOAD_URL = f"{BASE}partner/app/{APP_ID}/upload/media"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def service():
    store = TokenStore()
    store.set(TOKEN_KEY, TokenCache(token="token", expires_at=0))
    auth = LoginService(store=store, base_url=BASE)
    return TemplateService(auth, base_url=BASE)


def _mock_app_token(mocked):
    mocked.add(responses.GET, TOKEN_URL, json={"token": {"token": "token"}})


def _request(**overrides):
    values = dict(
        element_name="welcome",
        vertical="greeting",
        language_code="pt_BR",
        category="MARKETING",
        template_type="TEXT",
        content="Hello {{1}}",
        example="Hello Variavel1",
    )
    values.update(overrides)
    return TemplateCreateRequest(**values)


def _form(call):
    return {k: v[0] for k, v in parse_qs(call.request.body, keep_blank_values=True).items()}


def test_get_templates_parses_list_and_sends_app_token(service, mocked):
    _mock_app_token(mocked)
    mocked.add(
        responses.GET,
        TEMPLATES_URL,
        json={"status": "success", "templates": [{"id": "t1", "elementName": "welcome"}]},
    )
    templates = service.get_templates(APP_ID)
    assert [t.id for t in templates] == ["t1"]
    assert templates[0].element_name == "welcome"
    assert mocked.calls[-1].request.headers["Authorization"] == "Bearer token"


def test_get_templates_propagates_app_token_failure(service, mocked):
    mocked.add(responses.GET, TOKEN_URL, status=500)
    with pytest.raises(PartnerApiError, match="erro na resposta da API: 500"):
        service.get_templates(APP_ID)


def test_get_templates_bad_json(service, mocked):
    _mock_app_token(mocked)
    mocked.add(responses.GET, TEMPLATES_URL, body="not json")
    with pytest.raises(PartnerApiError, match="erro ao decodificar resposta"):
        service.get_templates(APP_ID)


def test_each_call_fetches_a_fresh_app_token(service, mocked):
    _mock_app_token(mocked)
    mocked.add(responses.GET, TEMPLATES_URL, json={"templates": []})
    first = service.get_templates(APP_ID)
    second = service.get_templates(APP_ID)
    assert list(first) == []
    assert list(second) == []
    token_calls = [c for c in mocked.calls if c.request.url == TOKEN_URL]
    assert len(token_calls) == 2


def test_get_template_by_id(service, mocked):
    _mock_app_token(mocked)
    mocked.add(
        responses.GET,
        f"{BASE}wa/app/{APP_ID}/template/t9",
        json={"id": "t9", "status": "APPROVED", "meta": "{}"},
    )
    template = service.get_template_by_id(APP_ID, "t9")
    assert template.id == "t9"
    assert template.status == "APPROVED"


def test_get_template_by_id_non_ok_reports_status_and_body(service, mocked):
    _mock_app_token(mocked)
    mocked.add(responses.GET, f"{BASE}wa/app/{APP_ID}/template/t9", status=404, body="missing")
    with pytest.raises(PartnerApiError) as info:
        service.get_template_by_id(APP_ID, "t9")
    assert "Status: 404" in str(info.value)
    assert "missing" in str(info.value)


def test_get_template_by_id_wraps_token_error(service, mocked):
    mocked.add(responses.GET, TOKEN_URL, status=500)
    with pytest.raises(PartnerApiError, match="^erro ao obter token da aplicação"):
        service.get_template_by_id(APP_ID, "t9")


def test_create_template_text_sends_form(service, mocked):
    _mock_app_token(mocked)
    mocked.add(responses.POST, TEMPLATES_URL, status=201, json={})
    button = TemplateButton(type="QUICK_REPLY", text="Yes")
    original = _request(buttons=[button])
    sent = service.create_template_text(APP_ID, original)

    form = _form(mocked.calls[-1])
    assert form["elementName"] == "welcome"
    assert form["content"] == "Hello {{1}}"
    assert form["enableSample"] == "true"
    assert form["allowTemplateCategoryChange"] == "true"
    assert json.loads(form["buttons"]) == [button.to_dict()]
    assert sent.enable_sample and sent.allow_template_category_change
    assert original.enable_sample is False
    assert mocked.calls[-1].request.headers["Authorization"] == "Bearer token"


def test_create_template_text_without_buttons_omits_field(service, mocked):
    _mock_app_token(mocked)
    mocked.add(responses.POST, TEMPLATES_URL, status=200, json={})
    sent = service.create_template_text(APP_ID, _request())
    assert sent.element_name == "welcome"
    assert sent.enable_sample is True
    assert "buttons" not in _form(mocked.calls[-1])


def test_create_template_text_failure_includes_body(service, mocked):
    _mock_app_token(mocked)
    mocked.add(responses.POST, TEMPLATES_URL, status=400, body="invalid category")
    with pytest.raises(PartnerApiError, match="erro na criação do template: invalid category"):
        service.create_template_text(APP_ID, _request())


def test_upload_image_returns_handle(service, mocked, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNGDATA")
    _mock_app_token(mocked)
    mocked.add(
        responses.POST,
        UPLOAD_URL,
        json={"status": "success", "handleId": {"message": "handle-1"}},
    )
    assert service.upload_image_for_template(APP_ID, image) == "handle-1"
    body = mocked.calls[-1].request.body
    assert b'filename="photo.png"' in body
    assert b"image/png" in body
    assert b"\x89PNGDATA" in body


def test_upload_image_failure_status(service, mocked, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"x")
    _mock_app_token(mocked)
    mocked.add(responses.POST, UPLOAD_URL, json={"status": "error", "message": "too big"})
    with pytest.raises(PartnerApiError, match="upload falhou: too big"):
        service.upload_image_for_template(APP_ID, image)


def test_upload_image_bad_json(service, mocked, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"x")
    _mock_app_token(mocked)
    mocked.add(responses.POST, UPLOAD_URL, body="<html>")
    with pytest.raises(PartnerApiError, match="erro ao decodificar resposta"):
        service.upload_image_for_template(APP_ID, image)


def test_upload_image_missing_file(service, mocked, tmp_path):
    _mock_app_token(mocked)
    with pytest.raises(PartnerApiError, match="erro ao abrir arquivo de imagem"):
        service.upload_image_for_template(APP_ID, tmp_path / "absent.png")


def test_create_template_image_uses_handle(service, mocked, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"x")
    _mock_app_token(mocked)
    mocked.add(
        responses.POST,
        UPLOAD_URL,
        json={"status": "success", "handleId": {"message": "handle-1"}},
    )
    mocked.add(responses.POST, TEMPLATES_URL, status=200, json={})
    sent = service.create_template_image(
        APP_ID, image, _request(template_type="IMAGE", example_media=[str(image)])
    )
    assert sent.example_media == ["handle-1"]
    form = _form(mocked.calls[-1])
    assert form["exampleMedia"] == "handle-1"
    assert form["templateType"] == "IMAGE"


def test_create_template_image_wraps_upload_error(service, mocked, tmp_path):
    _mock_app_token(mocked)
    with pytest.raises(PartnerApiError, match="^erro ao fazer upload da imagem"):
        service.create_template_image(APP_ID, tmp_path / "absent.png", _request())