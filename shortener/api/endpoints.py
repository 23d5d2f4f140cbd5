"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Pulling values out of the request (form field, raw body, path, headers)
- Guarding privileged routes
- Turning service results into HTTP responses

All business logic is in RedirectService; failures are raised as
ShortenerException subclasses and mapped to status codes by the
application's exception handler.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from shortener.api.dependencies import get_redirect_service, require_admin
from shortener.api.schemas import RedirectSummary
from shortener.core.exceptions import ValidationError
from shortener.middleware.logging import get_client_ip
from shortener.services.redirect_service import RedirectService

router = APIRouter()

TOGGLE_MESSAGES = {
    "toggle": {
        "enabled": "Redirect enabled successfully!",
        "disabled": "Redirect disabled successfully!",
    },
    "domains": {
        "added": "Domain added to the blacklist successfully!",
        "removed": "Domain removed from the blacklist successfully!",
    },
    "words": {
        "added": "Word added to the blacklist successfully!",
        "removed": "Word removed from the blacklist successfully!",
    },
}


@router.post(
    "/",
    response_class=PlainTextResponse,
    summary="Create a short URL",
    description="Takes a long URL (form field 'link') and returns the short URL as text"
)
async def submit_url(
    request: Request,
    link: Optional[str] = Form(default=None),
    service: RedirectService = Depends(get_redirect_service),
) -> PlainTextResponse:
    short_url = await service.submit(link, get_client_ip(request))
    return PlainTextResponse(short_url)


@router.get(
    "/",
    response_model=list[RedirectSummary],
    dependencies=[Depends(require_admin)],
    summary="List all redirects",
)
async def list_redirects(service: RedirectService = Depends(get_redirect_service)):
    return await service.list_all()


@router.get(
    "/blacklist/{list_type}",
    dependencies=[Depends(require_admin)],
    summary="List enabled/disabled redirects or blacklisted domains/words",
)
async def list_by_type(
    list_type: str,
    service: RedirectService = Depends(get_redirect_service),
):
    return await service.list_by_type(list_type)


@router.post(
    "/blacklist/{action}",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_admin)],
    summary="Toggle a redirect, a blacklisted domain or a blacklisted word",
    description="The raw request body carries the ID, domain or word"
)
async def toggle(
    action: str,
    request: Request,
    service: RedirectService = Depends(get_redirect_service),
) -> PlainTextResponse:
    action = action.strip().lower()
    if not action:
        raise ValidationError("No type supplied!")

    try:
        value = (await request.body()).decode("utf-8").strip()
    except UnicodeDecodeError:
        raise ValidationError("Malformed value!")
    if not value:
        raise ValidationError("No value submitted!")

    actor_ip = get_client_ip(request)
    if action == "toggle":
        outcome = await service.toggle_enabled(value, actor_ip)
    elif action == "domains":
        outcome = await service.toggle_domain_blacklist(value, actor_ip)
    elif action == "words":
        outcome = await service.toggle_word_blacklist(value, actor_ip)
    else:
        raise ValidationError("Not a valid type!")

    return PlainTextResponse(TOGGLE_MESSAGES[action][outcome])


@router.get(
    "/{redirect_id}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Takes a short ID and redirects to the original long URL"
)
async def resolve(
    redirect_id: str,
    service: RedirectService = Depends(get_redirect_service),
) -> RedirectResponse:
    target = await service.resolve(redirect_id)
    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


@router.delete(
    "/{redirect_id}",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_admin)],
    summary="Delete a redirect",
)
async def delete_redirect(
    redirect_id: str,
    request: Request,
    service: RedirectService = Depends(get_redirect_service),
) -> PlainTextResponse:
    await service.delete(redirect_id, get_client_ip(request))
    return PlainTextResponse("Redirect deleted successfully!")


@router.get("/{path:path}", include_in_schema=False)
async def fallback(request: Request) -> RedirectResponse:
    """Anything no other route claims goes to the configured fallback page."""
    return RedirectResponse(
        url=request.app.state.settings.FALLBACK_URL,
        status_code=status.HTTP_302_FOUND,
    )


@router.options("/{path:path}", include_in_schema=False)
async def options() -> Response:
    """Plain OPTIONS requests get an empty answer; CORS preflights never reach here."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)
