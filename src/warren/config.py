"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, default_methods=("GET", "HEAD"))
    """

    debug: bool = False

    # Routing
    default_methods: tuple[str, ...] = ("GET",)

    # Fallback bodies for responses the core produces itself
    not_found_body: str = "<h1>404 Not Found</h1>"
    method_not_allowed_body: str = "<h1>405 Method Not Allowed</h1>"
    server_error_body: str = "<h1>500 Internal Server Error</h1>"

    # Templates (requires the ``templates`` extra)
    template_dir: str | Path = "templates"
    autoescape: bool = True

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB
