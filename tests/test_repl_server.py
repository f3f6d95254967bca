import json

import pytest

from pluglisp_server.repl_server import ReplServer


@pytest.fixture
def server(interp):
    return ReplServer(interp=interp)


def request(server, payload):
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    line = server.handle_line(raw)
    assert line.endswith(b"\n")
    return json.loads(line)


def test_eval(server):
    assert request(server, {"cmd": "eval", "code": "(+ 1 2)"}) == {"ok": True, "result": "3"}


def test_definitions_persist(server):
    request(server, {"cmd": "eval", "code": "(defn inc [x] (+ x 1))"})
    assert request(server, {"cmd": "eval", "code": "(inc 41)"})["result"] == "42"


def test_eval_error(server):
    resp = request(server, {"cmd": "eval", "code": "(nope)"})
    assert resp == {"ok": False, "error": "undefined symbol: nope"}


def test_plugins(server):
    resp = request(server, {"cmd": "plugins"})
    assert resp["ok"]
    control = next(p for p in resp["plugins"] if p["name"] == "control")
    assert control["dependencies"] == ["logical"]
    assert "if" in control["functions"]


@pytest.mark.parametrize(
    "payload, message",
    [
        (b"{not json", "Invalid request"),
        ([1, 2], "expected a JSON object"),
        ({"cmd": "eval", "code": 5}, "code must be a string"),
        ({"cmd": "dance"}, "Unknown cmd: dance"),
    ],
)
def test_bad_requests(server, payload, message):
    resp = request(server, payload)
    assert not resp["ok"]
    assert message in resp["error"]
