"""Tests for warren.cli — entrypoint, app resolution and ``warren routes``."""

import argparse
import sys
import types

import pytest

from warren.app import App
from warren.cli import main
from warren.cli._resolve import resolve_app
from warren.cli._routes import run_routes
from warren.routing.declare import controller, route


@controller(prefix="/users")
class UserHandler:
    @route("")
    def index(self, request, response):
        return response

    @route("/{id}", methods=["GET", "HEAD"])
    def show(self, request, response, id):
        return response


def _factory() -> App:
    app = App()
    app.register(UserHandler)
    return app


def _broken_factory() -> App:
    raise RuntimeError("no config")


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with warren Apps on sys.modules."""
    mod = types.ModuleType("_fake_warren_app")
    mod.app = _factory()  # type: ignore[attr-defined]
    mod.empty = App()  # type: ignore[attr-defined]
    mod.create_app = _factory  # type: ignore[attr-defined]
    mod.broken = _broken_factory  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_warren_app", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_routes_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "warren" in capsys.readouterr().out


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_warren_app:empty"), App)

    def test_default_attribute(self) -> None:
        """Omitting :attr defaults to 'app'."""
        app = resolve_app("_fake_warren_app")
        assert len(app.routes) == 2

    def test_factory_called(self) -> None:
        app = resolve_app("_fake_warren_app:create_app")
        assert isinstance(app, App)

    def test_factory_error(self) -> None:
        with pytest.raises(TypeError, match="no config"):
            resolve_app("_fake_warren_app:broken")

    def test_not_an_app(self) -> None:
        with pytest.raises(TypeError, match="not a warren.App"):
            resolve_app("_fake_warren_app:not_an_app")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_app("_fake_warren_app:nope")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("_no_such_module_for_warren:app")


@pytest.mark.usefixtures("_fake_app_module")
class TestRoutesCommand:
    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_warren_app:app"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert lines[2].split() == ["GET", "/users", "UserHandler.index"]
        assert lines[3].split() == ["GET,", "HEAD", "/users/{id}", "UserHandler.show"]

    def test_no_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        run_routes(argparse.Namespace(app="_fake_warren_app:empty"))
        assert "No routes registered." in capsys.readouterr().out

    def test_bad_import_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run_routes(argparse.Namespace(app="_fake_warren_app:not_an_app"))
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err
