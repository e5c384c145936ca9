"""Tests for the OCR provider client."""

from unittest.mock import MagicMock

import pytest
import requests

from shopsnap.errors import OCRProcessingError
from shopsnap.services.ocr_service import OCRService


@pytest.fixture
def service():
    service = OCRService("http://ocr.test/ocr", api_key="secret", max_retries=0)
    service.session.post = MagicMock()
    return service


def _response(payload=None, json_error=None):
    response = MagicMock()
    response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def test_session_headers():
    service = OCRService("http://ocr.test/ocr", api_key="secret", user_agent="Agent/2")
    assert service.session.headers["Authorization"] == "Bearer secret"
    assert service.session.headers["User-Agent"] == "Agent/2"


def test_no_auth_header_without_key():
    service = OCRService("http://ocr.test/ocr")
    assert "Authorization" not in service.session.headers


def test_from_config():
    service = OCRService.from_config({
        "OCR_API_URL": "http://ocr.example/v1",
        "OCR_TIMEOUT": 5,
        "OCR_LANGUAGE": "deu",
    })
    assert service.api_url == "http://ocr.example/v1"
    assert service.timeout == 5
    assert service.language == "deu"


def test_recognize_posts_image(service):
    service.session.post.return_value = _response({"text": "Milk", "words": []})

    result = service.recognize(b"jpeg-bytes", "list.jpg", "image/jpeg")

    assert result == {"text": "Milk", "words": []}
    args, kwargs = service.session.post.call_args
    assert args[0] == "http://ocr.test/ocr"
    assert kwargs["files"] == {"image": ("list.jpg", b"jpeg-bytes", "image/jpeg")}
    assert kwargs["data"] == {"language": "eng"}
    assert kwargs["timeout"] == 30


def test_missing_words_default_to_empty(service):
    service.session.post.return_value = _response({"text": "Milk", "words": "oops"})
    assert service.recognize(b"x")["words"] == []


def test_empty_image_rejected(service):
    with pytest.raises(OCRProcessingError):
        service.recognize(b"")
    service.session.post.assert_not_called()


def test_transport_error_wrapped(service):
    service.session.post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(OCRProcessingError) as exc_info:
        service.recognize(b"x")

    assert exc_info.value.status_code == 502
    assert "refused" in exc_info.value.message


def test_http_error_wrapped(service):
    response = _response({"text": "Milk"})
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    service.session.post.return_value = response

    with pytest.raises(OCRProcessingError):
        service.recognize(b"x")


def test_invalid_json_wrapped(service):
    service.session.post.return_value = _response(json_error=ValueError("bad json"))
    with pytest.raises(OCRProcessingError):
        service.recognize(b"x")


@pytest.mark.parametrize("payload", [[], {"words": []}, {"text": 12}])
def test_response_without_text_rejected(service, payload):
    service.session.post.return_value = _response(payload)
    with pytest.raises(OCRProcessingError):
        service.recognize(b"x")


def test_process_image_returns_items(service):
    service.session.post.return_value = _response({
        "text": "Milk\nBread",
        "words": [{"text": "Milk", "confidence": 95}],
    })

    items = service.process_image(b"x")

    assert [item.text for item in items] == ["Milk", "Bread"]
    assert items[0].confidence == pytest.approx(0.95)
    assert items[0].id.startswith("ocr-")
