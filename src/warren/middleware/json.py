"""JSON content-type guard."""

from warren.http.request import Request
from warren.http.response import Response
from warren.middleware.protocol import Next


class JsonMiddleware:
    """Reject requests that do not declare a JSON body.

    Requests whose ``Content-Type`` is not ``application/json`` get a
    ``400`` JSON error and never reach the handler. Media-type parameters
    such as ``; charset=utf-8`` are accepted. When the handler leaves the
    response untouched (an empty default ``Response()``), a ``200`` JSON
    acknowledgement is returned in its place.

    Usage::

        @route("/users", methods=["POST"], middleware=[JsonMiddleware])
        def create(self, request, response): ...
    """

    __slots__ = ()

    error_message = "Invalid Content-Type, expected application/json"
    success_message = "Request successfully processed"

    async def handle(self, request: Request, next: Next) -> Response:
        media_type = (request.content_type or "").split(";", 1)[0].strip().lower()
        if media_type != "application/json":
            return Response.json({"error": self.error_message}, status=400)
        response = await next()
        if response == Response():
            return Response.json({"message": self.success_message})
        return response
