"""
Simple TCP REPL server for PlugLisp.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(+ 1 2)"}
- Response: {"ok": true, "result": "3"} or {"ok": false, "error": <message>}
- Request: {"cmd": "plugins"}
- Response: {"ok": true, "plugins": [{"name": ..., "version": ..., ...}]}

The server keeps a single Interpreter alive so that definitions persist across
requests and connections. Evaluation is serialized with a lock.
"""

from __future__ import annotations

import argparse
import json
import logging
import socket
import threading
from typing import Any, Tuple

from pluglisp.errors import PlugLispError
from pluglisp.interpreter import Interpreter

HOST = "127.0.0.1"
PORT = 8765


class ReplServer:
    def __init__(self, host: str = HOST, port: int = PORT, interp: Interpreter | None = None):
        self.host = host
        self.port = port
        self.interp = interp if interp is not None else Interpreter()
        self._eval_lock = threading.Lock()
        self._logger = logging.getLogger("ReplServer")

    def handle_request(self, req: Any) -> dict:
        if not isinstance(req, dict):
            return {"ok": False, "error": "Invalid request: expected a JSON object"}
        cmd = req.get("cmd")
        if cmd == "eval":
            code = req.get("code", "")
            if not isinstance(code, str):
                return {"ok": False, "error": "Invalid request: code must be a string"}
            try:
                with self._eval_lock:
                    result = self.interp.eval(code)
                return {"ok": True, "result": str(result)}
            except PlugLispError as ex:
                return {"ok": False, "error": str(ex)}
        if cmd == "plugins":
            plugins = [
                {
                    "name": info.name,
                    "version": info.version,
                    "description": info.description,
                    "dependencies": list(info.dependencies),
                    "functions": list(info.functions),
                }
                for info in self.interp.plugin_manager.list_plugins()
            ]
            return {"ok": True, "plugins": plugins}
        return {"ok": False, "error": f"Unknown cmd: {cmd}"}

    def handle_line(self, line: bytes) -> bytes:
        """Decode one request line and return the encoded response line."""
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            resp = {"ok": False, "error": f"Invalid request: {ex}"}
        else:
            resp = self.handle_request(req)
        return (json.dumps(resp) + "\n").encode("utf-8")

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            self._logger.info("listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        self._logger.debug("client connected: %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    conn.sendall(self.handle_line(line))
        self._logger.debug("client disconnected: %s:%d", *addr)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="PlugLisp TCP REPL server")
    parser.add_argument('--host', default=HOST, help='Interface to bind')
    parser.add_argument('--port', type=int, default=PORT, help='Port to listen on')
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    ReplServer(args.host, args.port).serve_forever()


if __name__ == "__main__":
    main()
