from typing import Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response


def get_cors_headers(allowed_origin: str) -> Dict[str, str]:
    """Fixed cross-origin header set attached to every response"""
    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
        "Access-Control-Allow-Credentials": "false",
        "Content-Type": "application/json",
    }


def cors_json_response(
    request: Request, status_code: int, content: dict, allowed_origin: Optional[str] = None
) -> JSONResponse:
    origin = allowed_origin or request.app.state.allowed_origin
    return JSONResponse(
        status_code=status_code, content=content, headers=get_cors_headers(origin)
    )


def cors_preflight_response(request: Request) -> Response:
    """Answer an OPTIONS preflight with the header set and an empty body"""
    return Response(
        status_code=status.HTTP_200_OK,
        content=b"",
        headers=get_cors_headers(request.app.state.allowed_origin),
    )
