import httpx
import pytest

from siteguard.client.api import ApiClient, ApiError


def _client(handler) -> ApiClient:
    return ApiClient("http://siteguard.test/api", transport=httpx.MockTransport(handler))


def test_detail_becomes_error_message():
    api = _client(lambda request: httpx.Response(404, json={"detail": "Workspace not found"}))

    with pytest.raises(ApiError) as exc_info:
        api.get_workspace("ws-9")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Workspace not found"


def test_validation_errors_are_joined():
    detail = [{"msg": "Input should be greater than or equal to 0"}, {"msg": "Field required"}]
    api = _client(lambda request: httpx.Response(422, json={"detail": detail}))

    with pytest.raises(ApiError) as exc_info:
        api.add_resource("ws-1", {"name": "Cement", "quantity": -1})

    assert exc_info.value.message == "Input should be greater than or equal to 0; Field required"


def test_list_error_body_still_raises_api_error():
    api = _client(lambda request: httpx.Response(500, json=["boom"]))

    with pytest.raises(ApiError) as exc_info:
        api.get_all_workspaces()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == '["boom"]'


def test_plain_text_error_body():
    api = _client(lambda request: httpx.Response(502, text="Bad Gateway from proxy"))

    with pytest.raises(ApiError) as exc_info:
        api.get_all_workspaces()

    assert exc_info.value.message == "Bad Gateway from proxy"


def test_network_failure_has_status_zero():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as exc_info:
        _client(refuse).get_all_workspaces()

    assert exc_info.value.status_code == 0


def test_bearer_token_is_sent():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"data": [], "count": 0})

    api = ApiClient(
        "http://siteguard.test/api",
        token_provider=lambda: "jwt-token",
        transport=httpx.MockTransport(handler),
    )

    assert api.get_all_workspaces() == []
    assert seen == ["Bearer jwt-token"]
