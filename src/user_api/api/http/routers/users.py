"""Users API router with CRUD, partial update and paged listing."""

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response
from starlette.responses import JSONResponse

from src.user_api.api.http.deps import get_user_lifecycle_service
from src.user_api.api.http.schemas.users import (
    JsonPatchOperation,
    PaginationMetadata,
    UserCreateBody,
    UserResponse,
    UserUpdateBody,
    json_patch_to_request,
)
from src.user_api.core.exceptions import InvalidInputError
from src.user_api.core.models.page import Page
from src.user_api.core.services.user import UserLifecycleService
from src.user_api.runtime.context import get_config

router = APIRouter(prefix="/api/users", tags=["users"])

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _user_location(request: Request, user_id: str) -> str:
    return str(request.url_for("get_user_by_id", user_id=user_id))


def _page_link(request: Request, page_number: int | None, page_size: int) -> str | None:
    if page_number is None:
        return None
    return str(
        request.url_for("get_users").include_query_params(
            pageNumber=page_number, pageSize=page_size
        )
    )


def _pagination_header(request: Request, page: Page) -> str:
    metadata = PaginationMetadata(
        previous_page_link=_page_link(request, page.previous_page, page.page_size),
        next_page_link=_page_link(request, page.next_page, page.page_size),
        total_count=page.total_count,
        page_size=page.page_size,
        current_page=page.current_page,
        total_pages=page.total_pages,
    )
    return metadata.model_dump_json(by_alias=True)


@router.api_route(
    "/{user_id}",
    methods=["GET", "HEAD"],
    name="get_user_by_id",
    response_model=UserResponse,
)
def get_user_by_id(
    user_id: str,
    request: Request,
    service: UserLifecycleService = Depends(get_user_lifecycle_service),
):
    """Get a user by ID. HEAD answers with headers only."""
    user = service.get(user_id)
    if request.method == "HEAD":
        return Response(status_code=200, headers={"Content-Type": JSON_CONTENT_TYPE})
    return UserResponse.from_user(user)


@router.post("", status_code=201, name="create_user")
def create_user(
    request: Request,
    body: UserCreateBody | None = Body(default=None),
    service: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> JSONResponse:
    """Create a user; the response body is the new user's id."""
    if body is None:
        raise HTTPException(status_code=400, detail="Request body is required")

    _, created = service.create(body.to_request())
    return JSONResponse(
        status_code=201,
        content=created.user_id,
        headers={"Location": _user_location(request, created.user_id)},
    )


@router.put("/{user_id}", name="update_user")
def update_user(
    user_id: str,
    request: Request,
    body: UserUpdateBody | None = Body(default=None),
    service: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Response:
    """Replace a user, inserting it under the given id when it does not exist."""
    if body is None:
        raise HTTPException(status_code=400, detail="Request body is required")

    user, inserted = service.replace_or_insert(user_id, body.to_request())
    if inserted:
        return JSONResponse(
            status_code=201,
            content=user.id,
            headers={"Location": _user_location(request, user.id)},
        )
    return Response(status_code=204)


@router.patch("/{user_id}", name="partially_update_user")
def partially_update_user(
    user_id: str,
    operations: list[JsonPatchOperation] | None = Body(default=None),
    service: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Response:
    """Apply a JSON Patch document to a user."""
    if operations is None:
        raise HTTPException(status_code=400, detail="Patch document is required")

    # Unknown users are reported before any problem with the document itself
    service.get(user_id)

    patch, errors = json_patch_to_request(operations)
    if errors:
        raise InvalidInputError(errors)

    service.patch(user_id, patch)
    return Response(status_code=204)


@router.delete("/{user_id}", status_code=204, name="delete_user")
def delete_user(
    user_id: str,
    service: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Response:
    """Delete a user."""
    service.delete(user_id)
    return Response(status_code=204)


@router.get("", name="get_users", response_model=list[UserResponse])
def get_users(
    request: Request,
    response: Response,
    page_number: int = Query(default=1, alias="pageNumber"),
    page_size: int | None = Query(default=None, alias="pageSize"),
    service: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> list[UserResponse]:
    """List users one page at a time with an ``X-Pagination`` header."""
    if page_size is None:
        page_size = get_config().pagination.default_page_size

    page = service.list(page_number, page_size)
    response.headers["X-Pagination"] = _pagination_header(request, page)
    return [UserResponse.from_user(user) for user in page.items]
