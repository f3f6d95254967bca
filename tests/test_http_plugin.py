import json

import httpx
import pytest

from pluglisp.errors import PlugLispError
from pluglisp.interpreter import Interpreter
from pluglisp.plugins import CorePlugin, HashMapPlugin, HttpPlugin, JsonPlugin


def handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/fail":
        raise httpx.ConnectError("connection refused", request=request)
    payload = {
        "method": request.method,
        "path": request.url.path,
        "body": request.content.decode("utf-8"),
        "content_type": request.headers.get("content-type", ""),
        "token": request.headers.get("x-token", ""),
    }
    return httpx.Response(201 if request.method == "POST" else 200, json=payload,
                          headers={"x-served-by": "mock"})


@pytest.fixture
def http_interp():
    interpreter = Interpreter(
        [CorePlugin(), HashMapPlugin(), JsonPlugin(), HttpPlugin(transport=httpx.MockTransport(handler))]
    )
    yield interpreter
    interpreter.shutdown()


def echoed(interp, source):
    response = interp.eval(source)
    return response, json.loads(response.elements["body"].value)


def test_get(http_interp):
    response, body = echoed(http_interp, '(http-get "http://test/items")')
    assert str(response.elements["status"]) == "200"
    assert body["method"] == "GET" and body["path"] == "/items"
    assert str(response.elements["headers"].elements["x-served-by"]) == "mock"


def test_post_string_body(http_interp):
    response, body = echoed(http_interp, '(http-post "http://test/items" "raw text")')
    assert str(response.elements["status"]) == "201"
    assert body["body"] == "raw text"


def test_post_map_body_is_json(http_interp):
    _, body = echoed(http_interp, '(http-post "http://test/items" {:name "widget" :qty 2})')
    assert json.loads(body["body"]) == {"name": "widget", "qty": 2}
    assert body["content_type"] == "application/json"


def test_custom_headers(http_interp):
    _, body = echoed(http_interp, '(http-put "http://test/items/1" "x" {"x-token" "secret"})')
    assert body["method"] == "PUT"
    assert body["token"] == "secret"


def test_delete(http_interp):
    _, body = echoed(http_interp, '(http-delete "http://test/items/1")')
    assert body["method"] == "DELETE"


def test_response_usable_from_lisp(http_interp):
    src = '(hash-map-get (json-parse (hash-map-get (http-get "http://test/x") "body")) "path")'
    assert str(http_interp.eval(src)) == "/x"


def test_transport_errors_become_lisp_errors(http_interp):
    with pytest.raises(PlugLispError, match="http-get"):
        http_interp.eval('(http-get "http://test/fail")')


def test_bad_headers(http_interp):
    with pytest.raises(PlugLispError, match="headers must be a hash map"):
        http_interp.eval('(http-get "http://test/x" "nope")')


def test_client_closed_on_unload(http_interp):
    plugin = http_interp.plugin_manager.get_plugin("http")
    http_interp.plugin_manager.unload_plugin("http")
    assert plugin._client is None
