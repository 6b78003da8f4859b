"""
HTTP-style errors raised by the data and service layers.
The route layer turns them into JSON responses (see eventhub.main).
"""

from fastapi import Request
from fastapi.responses import JSONResponse


class HttpError(Exception):
    """Error carrying an HTTP status code, its status text and a message."""

    def __init__(self, status_code: int, status_text: str, message: str):
        self.status_code = status_code
        self.status_text = status_text
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"<HttpError({self.status_code} {self.status_text}: {self.message})>"


async def http_error_handler(request: Request, exc: HttpError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": f"{exc.status_code} {exc.status_text}", "message": exc.message},
    )
