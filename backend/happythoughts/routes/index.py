"""GET / : welcome message and a listing of every API route."""

from typing import Any, Dict, List

from fastapi import APIRouter, Request

from happythoughts.schemas.common import EndpointInfo, WelcomeResponse

router = APIRouter(tags=["Info"])

HTTP_METHODS = frozenset({"get", "post", "put", "patch", "delete", "head", "options"})


def list_endpoints(openapi_schema: Dict[str, Any]) -> List[EndpointInfo]:
    """
    Path and methods of each documented route, in registration order.

    Read from the OpenAPI `paths` map, which FastAPI builds from every
    included router however it nests them internally.
    """
    return [
        EndpointInfo(
            path=path,
            methods=sorted(method.upper() for method in operations if method in HTTP_METHODS),
        )
        for path, operations in openapi_schema.get("paths", {}).items()
    ]


@router.get("/", response_model=WelcomeResponse, summary="API overview")
async def welcome(request: Request) -> WelcomeResponse:
    return WelcomeResponse(
        message="Welcome to the Happy Thoughts API",
        endpoints=list_endpoints(request.app.openapi()),
    )
