"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from thinktank_api.api.middleware import (
    RateLimitMiddleware,
    RequestIdMiddleware,
    SecurityHeadersMiddleware,
    setup_cors,
)
from thinktank_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from thinktank_api.api.v1.audit_logs import audit_logs_router
    from thinktank_api.api.v1.auth import router as auth_router
    from thinktank_api.api.v1.blog_posts import blog_posts_router
    from thinktank_api.api.v1.content import content_router
    from thinktank_api.api.v1.dashboards import dashboards_router
    from thinktank_api.api.v1.opportunities import opportunities_router
    from thinktank_api.api.v1.partners import partners_router
    from thinktank_api.api.v1.publications import publications_router
    from thinktank_api.api.v1.reports import reports_router
    from thinktank_api.api.v1.roles import roles_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(auth_router)
    root_router.include_router(publications_router)
    root_router.include_router(dashboards_router)
    root_router.include_router(content_router)
    root_router.include_router(reports_router)
    root_router.include_router(blog_posts_router)
    root_router.include_router(partners_router)
    root_router.include_router(opportunities_router)
    root_router.include_router(roles_router)
    root_router.include_router(audit_logs_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxy_headers=settings.trusted_proxy_header_list,
        exempt_paths=[f"{settings.api_v1_prefix}/health"],
    )
    app.add_middleware(RequestIdMiddleware)
