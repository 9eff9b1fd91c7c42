"""Tests for roost.cli: entrypoint, router resolution, routes and run."""

import sys
import types

import pytest

from roost.cli import main
from roost.cli._resolve import resolve_router
from roost.router import Router


def _show_user(response, user_id):
    return response


def _not_found(response):
    return response.with_status(404)


@pytest.fixture
def _fake_router_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with roost routers on sys.modules."""
    router = Router()
    router.before("GET", "/admin/.*", _show_user)
    router.get("/users/{id}", _show_user)
    router.set_404("/api/.*", _not_found)
    router.set_404(_not_found)

    broken = Router()
    broken.get("/", "Missing@index")

    mod = types.ModuleType("_fake_roost_app")
    mod.router = router  # type: ignore[attr-defined]
    mod.empty = Router()  # type: ignore[attr-defined]
    mod.broken = broken  # type: ignore[attr-defined]
    mod.make_router = Router  # type: ignore[attr-defined]
    mod.not_a_router = "just a string"  # type: ignore[attr-defined]
    mod.bad_factory = lambda: 1 / 0  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_roost_app", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_run_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "--help"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out

    def test_run_missing_router(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 2

    def test_invalid_log_level(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "_fake_roost_app", "--log-level", "loud"])
        assert exc_info.value.code == 2


@pytest.mark.usefixtures("_fake_router_module")
class TestResolveRouter:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_router("_fake_roost_app:empty"), Router)

    def test_default_attribute(self) -> None:
        """Omitting :attr defaults to 'router'."""
        assert resolve_router("_fake_roost_app") is sys.modules["_fake_roost_app"].router

    def test_factory(self) -> None:
        assert isinstance(resolve_router("_fake_roost_app:make_router"), Router)

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_router("nonexistent_module_xyz:router")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_router("_fake_roost_app:does_not_exist")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"not a roost\.Router instance"):
            resolve_router("_fake_roost_app:not_a_router")

    def test_factory_error(self) -> None:
        with pytest.raises(TypeError, match="raised an error"):
            resolve_router("_fake_roost_app:bad_factory")


@pytest.mark.usefixtures("_fake_router_module")
class TestRoutesCommand:
    def test_lists_routes_and_fallbacks(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_roost_app:router"])
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0].split() == ["METHOD", "KIND", "PATTERN", "HANDLER"]
        assert "before" in out
        assert "/users/{id}" in out
        assert "_show_user" in out
        assert "/api/.*" in out
        assert "(catch-all)" in out

    def test_empty_router(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_roost_app:empty"])
        assert "No routes registered." in capsys.readouterr().out

    def test_unresolvable_handler(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_roost_app:broken"])
        assert exc_info.value.code == 1
        assert "Missing@index" in capsys.readouterr().err

    def test_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_roost_app:not_a_router"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_router_module")
class TestRunCommand:
    def test_passes_config_to_server(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[object, ...]] = []

        def fake_run_dev_server(app, host, port, *, reload=False, app_path=None):
            calls.append((app, host, port, reload, app_path))

        monkeypatch.setattr("roost.server.dev.run_dev_server", fake_run_dev_server)
        main(["run", "_fake_roost_app:router", "--port", "9001"])

        router = sys.modules["_fake_roost_app"].router
        assert calls == [(router, "127.0.0.1", 9001, False, None)]

    def test_host_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[str] = []
        monkeypatch.setattr(
            "roost.server.dev.run_dev_server",
            lambda app, host, port, **kwargs: calls.append(host),
        )
        main(["run", "_fake_roost_app", "--host", "0.0.0.0"])
        assert calls == ["0.0.0.0"]

    def test_bad_import_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "nonexistent_module_xyz"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err
