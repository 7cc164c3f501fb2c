"""Warren — declarative routing, middleware and dependency injection.

Handler classes declare their routes; warren builds the route table,
constructs handlers with their dependencies, and runs each request
through an onion of middleware.

Basic usage::

    from warren import App, Response, controller, route

    app = App()

    @app.register
    @controller(prefix="/users")
    class UserHandler:
        def __init__(self, repo: UserRepo) -> None:
            self.repo = repo

        @route("/{id}")
        def show(self, request, response, id):
            return response.with_body(self.repo.name(id))

Templates (``pip install warren[templates]``)::

    from warren.rendering import TemplateRenderer
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "CircularDependencyError",
    "ConfigurationError",
    "HTTPError",
    "JsonMiddleware",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "RegistrationError",
    "Request",
    "ResolutionError",
    "Resolver",
    "Response",
    "WarrenError",
    "controller",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from warren.app import App

        return App

    if name == "AppConfig":
        from warren.config import AppConfig

        return AppConfig

    if name == "Request":
        from warren.http.request import Request

        return Request

    if name == "Response":
        from warren.http.response import Response

        return Response

    if name == "Resolver":
        from warren.resolver import Resolver

        return Resolver

    if name in ("controller", "route"):
        from warren.routing import declare as _declare

        return getattr(_declare, name)

    if name in ("Middleware", "Next"):
        from warren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "JsonMiddleware":
        from warren.middleware.json import JsonMiddleware

        return JsonMiddleware

    if name in (
        "CircularDependencyError",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "RegistrationError",
        "ResolutionError",
        "WarrenError",
    ):
        from warren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
