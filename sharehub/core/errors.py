from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class BadRequest(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "token invalid"):
        super().__init__(status_code=401, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "not found"):
        super().__init__(status_code=404, detail=detail)


class Conflict(HTTPException):
    """E-mail já cadastrado (responde 400)."""

    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class ServerError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse({"error": message}, status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    """Todo erro sai como {"error": <mensagem>}."""
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
