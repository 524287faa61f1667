import pytest
import requests

from conftest import FakeResponse, FakeSession
from database.api_client import ApiClient, ApiError, NetworkError, NotFoundError


def _client(*responses):
    session = FakeSession(*responses)
    return ApiClient("http://api.test/api/", timeout=3, session=session), session


def test_get_decodes_json():
    client, session = _client(FakeResponse(200, [{"id": 1}]))
    assert client.get("/categories") == [{"id": 1}]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://api.test/api/categories"
    assert call["timeout"] == 3
    assert session.headers["Accept"].startswith("application/json")


def test_post_sends_json_body():
    client, session = _client(FakeResponse(201, {"id": 5, "name": "Food"}))
    assert client.post("/categories", {"name": "Food"}) == {"id": 5, "name": "Food"}
    assert session.calls[0]["json"] == {"name": "Food"}


@pytest.mark.parametrize("status", [200, 202, 204])
def test_empty_success_body_is_none(status):
    client, _ = _client(FakeResponse(status, content_type=None))
    assert client.delete("/categories/1") is None


def test_non_json_success_body_is_none():
    client, _ = _client(FakeResponse(200, text="OK", content_type="text/plain"))
    assert client.put("/categories/1", {}) is None


def test_error_message_from_json_body():
    client, _ = _client(FakeResponse(400, {"error": "Name taken"}))
    with pytest.raises(ApiError) as exc:
        client.post("/categories", {})
    assert str(exc.value) == "Name taken"
    assert exc.value.status == 400


def test_error_message_fallbacks():
    client, _ = _client(
        FakeResponse(500, text="", reason="", content_type="text/plain"),
        FakeResponse(503, text="maintenance", content_type="text/html"),
    )
    with pytest.raises(ApiError, match="Request failed with status 500"):
        client.get("/categories")
    with pytest.raises(ApiError, match="maintenance"):
        client.get("/categories")


def test_not_found():
    client, _ = _client(FakeResponse(404, {"message": "Category not found"}))
    with pytest.raises(NotFoundError) as exc:
        client.get("/categories/9")
    assert exc.value.status == 404


def test_transport_failure_is_network_error():
    client, _ = _client(requests.ConnectionError("refused"))
    with pytest.raises(NetworkError) as exc:
        client.get("/categories")
    assert "Network error" in str(exc.value)
    assert exc.value.status is None
    assert isinstance(exc.value, ApiError)


def test_close():
    client, session = _client()
    client.close()
    assert session.closed
