"""Public site endpoints. No authentication.

GET /publications, GET /blog/{slug}, GET /careers, GET /partners/public,
GET /departments.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from thinktank_api.core.dependencies import BackendDep, PublicStore
from thinktank_api.schemas.blog import BlogPostPage, BlogPostResponse, RelatedPost
from thinktank_api.schemas.common import DepartmentRef
from thinktank_api.schemas.department import DepartmentResponse
from thinktank_api.schemas.opportunity import OpportunityResponse
from thinktank_api.schemas.partner import PartnerListResponse, PartnerResponse
from thinktank_api.schemas.publication import CareerListResponse, PublicationItem, PublicationListResponse
from thinktank_api.services import department_service, partner_service, publication_service

publications_router = APIRouter(tags=["public"])


@publications_router.get("/publications", response_model=PublicationListResponse)
async def list_publications(
    backend: BackendDep,
    search: str | None = None,
    type: Annotated[str | None, Query(description="Content type, or 'all'")] = None,
    department: Annotated[str | None, Query(description="Department slug, or 'all'")] = None,
) -> PublicationListResponse:
    """Published content and public reports, newest first.

    ``types`` and ``departments`` list the facets present in the whole feed,
    not just the filtered page.
    """
    feed = await backend.publications.get(backend.data_store)
    items = publication_service.filter_publications(feed, search=search, content_type=type, department=department)
    return PublicationListResponse(
        items=[PublicationItem.model_validate(item) for item in items],
        total=len(items),
        types=publication_service.feed_types(feed),
        departments=[DepartmentRef.model_validate(d) for d in publication_service.feed_departments(feed)],
    )


@publications_router.get("/blog/{slug}", response_model=BlogPostPage)
async def get_blog_post(slug: str, store: PublicStore) -> BlogPostPage:
    post, related = await publication_service.get_blog_post_page(store, slug)
    return BlogPostPage(
        post=BlogPostResponse.model_validate(post),
        related=[RelatedPost.model_validate(row) for row in related],
    )


@publications_router.get("/careers", response_model=CareerListResponse)
async def list_careers(
    store: PublicStore,
    type: str | None = None,
    department: str | None = None,
) -> CareerListResponse:
    items = await publication_service.list_careers(store, opportunity_type=type, department=department)
    return CareerListResponse(items=[OpportunityResponse.model_validate(item) for item in items], total=len(items))


@publications_router.get("/partners/public", response_model=PartnerListResponse)
async def list_public_partners(store: PublicStore) -> PartnerListResponse:
    rows = await partner_service.list_partners(store, active_only=True)
    return PartnerListResponse(items=[PartnerResponse.model_validate(row) for row in rows])


@publications_router.get("/departments", response_model=list[DepartmentResponse])
async def list_departments(store: PublicStore) -> list[DepartmentResponse]:
    rows = await department_service.list_departments(store)
    return [DepartmentResponse.model_validate(row) for row in rows]
