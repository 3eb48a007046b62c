"""FastAPI/Starlette request adapter.

Converts a framework request into the transport-neutral RequestContext the
authorization pipeline consumes. Upstream middleware may put a known user
id on ``request.state.user_id``; it becomes the rate limit identifier hint.

Usage:
    from fastapi import Request

    @router.get("/grades")
    async def list_grades(request: Request) -> ...:
        verdict = await service.authorize(
            request_context_from(request),
            requires_permission(Resource.GRADES, Action.READ),
        )
"""

from fastapi import Request

from schoolgate.domain.value_objects import RequestContext


def request_context_from(request: Request) -> RequestContext:
    """Snapshot cookies, headers, peer address, method and URL."""
    user_id_hint = getattr(request.state, "user_id", None)
    return RequestContext(
        cookies=dict(request.cookies),
        headers=dict(request.headers),
        client_host=request.client.host if request.client else None,
        method=request.method,
        url=str(request.url),
        user_id_hint=str(user_id_hint) if user_id_hint else None,
    )
