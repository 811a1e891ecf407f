# FILE: inland/api/sites.py
import logging
from datetime import timezone
from typing import Optional

from fastapi import APIRouter, Depends

from inland.api.articles import _article_response
from inland.api.deps import get_context, get_current_user
from inland.core.context import AppContext
from inland.models.site import Site
from inland.schemas.articles import ImportResponse
from inland.schemas.sites import (
    CreateSiteRequest,
    SiteCreatedResponse,
    SiteListResponse,
    SiteResponse,
    UpdateSiteRequest,
)
from inland.services import article_service, site_service

router = APIRouter(prefix="/api/sites", tags=["sites"])
logger = logging.getLogger("inland.api")


def _site_response(site: Site, article_count: Optional[int] = None, media_count: Optional[int] = None) -> SiteResponse:
    return SiteResponse(
        id=site.id,
        user_id=site.user_id,
        name=site.name,
        git_repo=site.git_repo,
        platform=site.platform,
        deploy_status=site.deploy_status,
        deploy_url=site.deploy_url,
        created_at=site.created_at.replace(tzinfo=timezone.utc).isoformat(),
        updated_at=site.updated_at.replace(tzinfo=timezone.utc).isoformat(),
        article_count=article_count,
        media_count=media_count,
    )


@router.post("", response_model=SiteCreatedResponse, status_code=201)
async def create_site(
        data: CreateSiteRequest,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    """Provision a repository from the template, enable Pages and import its articles."""
    created = await site_service.create_site(
        ctx,
        user["id"],
        site_service.CreateSiteData(
            name=data.name,
            description=data.description,
            author=data.author,
            template_owner=data.template_owner,
            template_repo=data.template_repo,
        ),
    )
    return SiteCreatedResponse(
        site=_site_response(created.site),
        github_url=created.html_url,
        pages_url=created.pages_url,
        imported=created.imported,
        total=created.total,
    )


@router.get("", response_model=SiteListResponse)
async def list_sites(
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    summaries = await site_service.list_user_sites(ctx, user["id"])
    return SiteListResponse(sites=[_site_response(s.site, s.article_count) for s in summaries])


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(
        site_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    detail = await site_service.find_site(ctx, site_id, user["id"])
    return _site_response(detail.site, detail.article_count, detail.media_count)


@router.put("/{site_id}", response_model=SiteResponse)
async def update_site(
        site_id: str,
        data: UpdateSiteRequest,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    site = await site_service.update_site(
        ctx, site_id, user["id"], site_service.UpdateSiteData(**data.model_dump(exclude_unset=True))
    )
    return _site_response(site)


@router.delete("/{site_id}")
async def delete_site(
        site_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    """Delete the site record. The GitHub repository is not deleted."""
    site = await site_service.delete_site(ctx, site_id, user["id"])
    return {"message": "Site deleted successfully", "site": _site_response(site), "repository_kept": site.git_repo}


@router.post("/{site_id}/import", response_model=ImportResponse)
async def import_articles(
        site_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    result = await article_service.import_articles_from_repo(ctx, site_id, user["id"])
    return ImportResponse(
        imported=result.imported,
        total=result.total,
        failed=result.failed,
        articles=[_article_response(a) for a in result.articles],
    )
