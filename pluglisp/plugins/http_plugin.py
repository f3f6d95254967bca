"""HTTP client builtins backed by httpx.

Each request returns a map: {"status" 200 "body" "..." "headers" {...}}.
Map request bodies are sent as JSON.
"""

from __future__ import annotations

import json
import logging

import httpx

from pluglisp import Expression, LispValue
from pluglisp.config import get_http_timeout
from pluglisp.errors import PlugLispError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import eval_args, expect_args_range, to_string
from pluglisp.plugins.json_plugin import to_json
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.nil import NilType
from pluglisp.types.values import HashMap, Number, String, type_name


class HttpPlugin(Plugin):
    name = "http"
    description = "HTTP client requests"
    category = Category.HTTP

    def __init__(self, transport: httpx.BaseTransport | None = None, timeout: float | None = None):
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.Client | None = None
        self._logger = logging.getLogger("HttpPlugin")

    def initialize(self, registry) -> None:
        timeout = self._timeout if self._timeout is not None else get_http_timeout()
        self._client = httpx.Client(
            timeout=timeout, transport=self._transport, follow_redirects=True
        )

    def shutdown(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @staticmethod
    def _headers(name: str, value: LispValue) -> dict[str, str]:
        if isinstance(value, NilType):
            return {}
        if not isinstance(value, HashMap):
            raise PlugLispTypeError(f"{name}: headers must be a hash map, got {type_name(value)}")
        return {k: str(v) for k, v in value.elements.items()}

    def _request(self, method: str, evaluator, args: list[Expression], with_body: bool) -> LispValue:
        name = f"http-{method.lower()}"
        required = 2 if with_body else 1
        expect_args_range(name, args, required, required + 1)
        values = eval_args(evaluator, args)
        url = to_string(name, values[0])
        headers = self._headers(name, values[required]) if len(values) > required else {}
        content = None
        if with_body:
            body = values[1]
            if isinstance(body, String):
                content = body.value
            else:
                content = json.dumps(to_json(body))
                headers.setdefault("Content-Type", "application/json")
        if self._client is None:
            raise PlugLispError(f"{name}: http plugin is not initialized")
        self._logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, content=content, headers=headers)
        except httpx.HTTPError as err:
            raise PlugLispError(f"{name}: {err}") from err
        return HashMap({
            "status": Number(response.status_code),
            "body": String(response.text),
            "headers": HashMap({k: String(v) for k, v in response.headers.items()}),
        })

    def http_get(self, evaluator, args: list[Expression]) -> LispValue:
        """(http-get url [headers])"""
        return self._request("GET", evaluator, args, with_body=False)

    def http_post(self, evaluator, args: list[Expression]) -> LispValue:
        """(http-post url body [headers])"""
        return self._request("POST", evaluator, args, with_body=True)

    def http_put(self, evaluator, args: list[Expression]) -> LispValue:
        return self._request("PUT", evaluator, args, with_body=True)

    def http_delete(self, evaluator, args: list[Expression]) -> LispValue:
        return self._request("DELETE", evaluator, args, with_body=False)

    def functions(self):
        return [
            ("http-get", VARIADIC, "GET request: (http-get url [headers])", self.http_get),
            ("http-post", VARIADIC, "POST request: (http-post url body [headers])", self.http_post),
            ("http-put", VARIADIC, "PUT request: (http-put url body [headers])", self.http_put),
            ("http-delete", VARIADIC, "DELETE request: (http-delete url [headers])", self.http_delete),
        ]
