"""CORS: permissive cross-origin headers on every response, bare pre-flight answers.

Invariants:
    - Every response passing through the app carries Access-Control-Allow-* headers,
      whether or not the request sent Origin
    - Any OPTIONS request is answered 200 with the CORS headers and an empty body,
      on any path, before routing
    - Headers already set by CORSMiddleware are left untouched

Design Decisions:
    - CORSMiddleware kept for origin matching on browser requests; the outer
      middleware fills the gaps it leaves (no Origin, OPTIONS without
      Access-Control-Request-Method, "OK" pre-flight body)
"""

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

CORS_ALLOW_METHODS = ("GET", "POST", "OPTIONS")
CORS_ALLOW_HEADERS = ("Content-Type",)


def cors_headers(origins: list[str], request_origin: str | None) -> dict[str, str]:
    """Headers to add for a request from request_origin (None when not sent)."""
    headers = {
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }
    if "*" in origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif request_origin in origins:
        headers["Access-Control-Allow-Origin"] = request_origin
        headers["Vary"] = "Origin"
    return headers


def register_cors(app: FastAPI, origins: list[str]) -> None:
    """Install CORSMiddleware and the outer header/pre-flight middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=list(CORS_ALLOW_METHODS),
        allow_headers=["*"],
    )

    # Added last, so it runs outermost and sees OPTIONS before CORSMiddleware.
    @app.middleware("http")
    async def apply_cors_headers(request: Request, call_next):
        headers = cors_headers(origins, request.headers.get("origin"))
        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_200_OK, headers=headers)
        response = await call_next(request)
        for name, value in headers.items():
            if name.lower() not in response.headers:
                response.headers[name] = value
        return response
