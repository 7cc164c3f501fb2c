"""Rendering helpers — JSON and template responses.

JSON rendering uses the standard library. Template rendering uses the
kida template engine, an optional dependency::

    pip install warren[templates]

Handlers receive a ``TemplateRenderer`` through constructor injection::

    class PageHandler:
        def __init__(self, renderer: TemplateRenderer) -> None:
            self.renderer = renderer

        @route("/")
        def index(self, request, response):
            return self.renderer.respond("index.html", title="Home")
"""

from collections.abc import Mapping
from typing import Any

from warren.config import AppConfig
from warren.errors import ConfigurationError
from warren.http.response import Response


def render_json(
    data: Any,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Build a JSON response from *data*."""
    return Response.json(data, status=status, headers=headers)


class TemplateRenderer:
    """Renders templates from ``AppConfig.template_dir`` with kida.

    The kida environment is created on first render, so constructing a
    renderer (and injecting it) never requires kida to be installed.
    """

    __slots__ = ("_env", "config")

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._env: Any = None

    def _environment(self) -> Any:
        if self._env is None:
            try:
                from kida import Environment, FileSystemLoader
            except ImportError as exc:
                msg = (
                    "Template rendering requires the kida template engine. "
                    "Install it with: pip install warren[templates]"
                )
                raise ConfigurationError(msg) from exc
            self._env = Environment(
                loader=FileSystemLoader(str(self.config.template_dir)),
                autoescape=self.config.autoescape,
                auto_reload=self.config.debug,
            )
        return self._env

    def render(self, template: str, **context: Any) -> str:
        """Render *template* with *context* to a string."""
        return self._environment().get_template(template).render(context)

    def respond(
        self,
        template: str,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
        **context: Any,
    ) -> Response:
        """Render *template* into an HTML response."""
        response = Response(body=self.render(template, **context), status=status)
        if headers:
            response = response.with_headers(headers)
        return response
