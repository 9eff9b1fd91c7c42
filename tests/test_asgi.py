"""Tests for roost.server.asgi and roost.server.sender."""

from typing import Any

import pytest

from roost import Router
from roost.http.response import Response, redirect
from roost.server.sender import send_response


class _Collector:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)


def _receiver(*messages: dict[str, Any]):
    queue = list(messages)

    async def receive() -> dict[str, Any]:
        return queue.pop(0)

    return receive


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


def _scope(method: str = "GET", path: str = "/", **extra: Any) -> dict[str, Any]:
    scope: dict[str, Any] = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "root_path": "",
        "headers": [],
    }
    scope.update(extra)
    return scope


class TestSendResponse:
    @pytest.mark.anyio
    async def test_start_and_body(self) -> None:
        send = _Collector()
        await send_response(Response("hi").with_header("X-A", "1"), send)
        start, body = send.messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert (b"x-a", b"1") in start["headers"]
        assert (b"content-type", b"text/html; charset=utf-8") in start["headers"]
        assert (b"content-length", b"2") in start["headers"]
        assert body == {"type": "http.response.body", "body": b"hi"}

    @pytest.mark.anyio
    async def test_suppressed_body_keeps_length(self) -> None:
        send = _Collector()
        await send_response(Response("hello"), send, suppress_body=True)
        start, body = send.messages
        assert (b"content-length", b"5") in start["headers"]
        assert body["body"] == b""

    @pytest.mark.anyio
    async def test_no_body_status(self) -> None:
        send = _Collector()
        await send_response(Response("ignored", status=304), send)
        start, body = send.messages
        assert (b"content-length", b"0") in start["headers"]
        assert body["body"] == b""


class TestASGIAdapter:
    @pytest.mark.anyio
    async def test_dispatches_request(self) -> None:
        router = Router()
        router.get("/users/{id}", lambda r, user_id: r.with_body(f"user {user_id}"))
        send = _Collector()
        await router.asgi()(_scope(path="/users/5"), _no_body, send)
        assert send.messages[0]["status"] == 200
        assert send.messages[1]["body"] == b"user 5"

    @pytest.mark.anyio
    async def test_router_is_asgi_callable(self) -> None:
        router = Router()
        router.get("/", lambda r: r.with_body("home"))
        send = _Collector()
        await router(_scope(), _no_body, send)
        assert send.messages[1]["body"] == b"home"

    @pytest.mark.anyio
    async def test_head_request(self) -> None:
        router = Router()
        router.get("/", lambda r: r.with_body("home"))
        send = _Collector()
        await router.asgi()(_scope("HEAD"), _no_body, send)
        assert send.messages[0]["status"] == 200
        assert (b"content-length", b"4") in send.messages[0]["headers"]
        assert send.messages[1]["body"] == b""

    @pytest.mark.anyio
    async def test_not_found(self) -> None:
        send = _Collector()
        await Router().asgi()(_scope(path="/missing"), _no_body, send)
        assert send.messages[0]["status"] == 404

    @pytest.mark.anyio
    async def test_redirect(self) -> None:
        router = Router()
        router.get("/old", lambda r: redirect("/new"))
        send = _Collector()
        await router.asgi()(_scope(path="/old"), _no_body, send)
        assert send.messages[0]["status"] == 302
        assert (b"location", b"/new") in send.messages[0]["headers"]

    @pytest.mark.anyio
    async def test_method_override_header(self) -> None:
        router = Router()
        router.delete("/items/{id}", lambda r, item_id: r.with_body(f"deleted {item_id}"))
        send = _Collector()
        scope = _scope("POST", "/items/3", headers=[(b"x-http-method-override", b"DELETE")])
        await router.asgi()(scope, _no_body, send)
        assert send.messages[1]["body"] == b"deleted 3"

    @pytest.mark.anyio
    async def test_root_path_stripped(self) -> None:
        router = Router()
        router.get("/posts", lambda r: r.with_body("posts"))
        send = _Collector()
        await router.asgi()(_scope(path="/blog/posts", root_path="/blog"), _no_body, send)
        assert send.messages[1]["body"] == b"posts"

    @pytest.mark.anyio
    async def test_ignores_other_scope_types(self) -> None:
        send = _Collector()
        await Router().asgi()({"type": "websocket"}, _no_body, send)
        assert send.messages == []

    @pytest.mark.anyio
    async def test_literal_percent_survives_single_decode(self) -> None:
        router = Router()
        router.get("/files/{name}", lambda r, name: r.with_body(name))
        send = _Collector()
        scope = _scope(path="/files/%41", raw_path=b"/files/%2541")
        await router.asgi()(scope, _no_body, send)
        assert send.messages[1]["body"] == b"%41"

    @pytest.mark.anyio
    async def test_decoded_path_without_raw_path(self) -> None:
        router = Router()
        router.get("/tag/{name}", lambda r, name: r.with_body(name))
        send = _Collector()
        await router.asgi()(_scope(path="/tag/café"), _no_body, send)
        assert send.messages[1]["body"] == "café".encode()


class TestLifespan:
    @pytest.mark.anyio
    async def test_startup_freezes(self) -> None:
        router = Router()
        router.get("/", lambda r: r)
        send = _Collector()
        receive = _receiver({"type": "lifespan.startup"}, {"type": "lifespan.shutdown"})
        await router.asgi()({"type": "lifespan"}, receive, send)
        assert router.frozen
        assert [m["type"] for m in send.messages] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    @pytest.mark.anyio
    async def test_startup_fails_on_bad_reference(self) -> None:
        router = Router()
        router.get("/", "Missing@index")
        send = _Collector()
        receive = _receiver({"type": "lifespan.startup"})
        await router.asgi()({"type": "lifespan"}, receive, send)
        assert send.messages[0]["type"] == "lifespan.startup.failed"
        assert "Missing@index" in send.messages[0]["message"]
