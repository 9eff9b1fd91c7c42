"""Tests for roost.http.response."""

import pytest

from roost.http.response import Redirect, Response, ResponseContract, is_response, redirect


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body == ""
        assert response.content_type == "text/html; charset=utf-8"
        assert response.headers == ()

    def test_with_status_returns_new(self) -> None:
        original = Response("x")
        changed = original.with_status(201)
        assert changed.status == 201
        assert original.status == 200

    def test_chaining(self) -> None:
        response = (
            Response()
            .with_body("hi")
            .with_status(202)
            .with_header("X-A", "1")
            .with_headers({"X-B": "2"})
            .with_content_type("text/plain")
        )
        assert response.text == "hi"
        assert response.status == 202
        assert response.headers == (("X-A", "1"), ("X-B", "2"))
        assert response.content_type == "text/plain"

    def test_without_header(self) -> None:
        response = Response().with_header("X-A", "1").with_header("x-a", "2").with_header("X-B", "3")
        assert response.without_header("X-A").headers == (("X-B", "3"),)

    def test_header_lookup(self) -> None:
        response = Response().with_header("Cache-Control", "no-store")
        assert response.header("cache-control") == "no-store"
        assert response.header("missing") is None
        assert response.header("missing", "d") == "d"

    def test_body_bytes_and_text(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"raw").text == "raw"
        assert Response(b"raw").body_bytes == b"raw"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]


class TestRedirect:
    def test_location_header(self) -> None:
        response = redirect("/login")
        assert isinstance(response, Redirect)
        assert response.status == 302
        assert response.header("Location") == "/login"

    def test_custom_status(self) -> None:
        assert redirect("/new", 301).status == 301

    def test_existing_location_kept(self) -> None:
        response = Redirect(url="/a", headers=(("location", "/b"),))
        assert response.headers == (("location", "/b"),)

    def test_is_a_response(self) -> None:
        assert isinstance(redirect("/"), Response)


class TestResponseContract:
    def test_response_conforms(self) -> None:
        assert is_response(Response())
        assert isinstance(Response(), ResponseContract)

    def test_structural_object_conforms(self) -> None:
        class HostResponse:
            def __init__(self) -> None:
                self.status = 200
                self.headers = {}
                self.body = b""

        assert is_response(HostResponse())

    @pytest.mark.parametrize("value", [None, "text", 200, {"status": 200}])
    def test_non_responses(self, value: object) -> None:
        assert not is_response(value)
