# FILE: inland/services/site_service.py
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from inland.core.context import AppContext
from inland.core.database import utcnow
from inland.core.errors import DuplicateSiteNameError, InlandError
from inland.models.article import Article
from inland.models.media import Media
from inland.models.site import DEPLOY_DEPLOYED, Site
from inland.services import article_sync_service, provisioning_service
from inland.services.access import get_owned_site
from inland.services.providers import CreateRepoData, TemplateData
from inland.services.token_service import resolve_token
from inland.services.validation import slugify_site_name, validate_git_repo, validate_site_name

logger = logging.getLogger("inland.sites")


@dataclass
class CreateSiteData:
    name: str
    description: Optional[str] = None
    author: Optional[str] = None
    template_owner: Optional[str] = None
    template_repo: Optional[str] = None


@dataclass
class UpdateSiteData:
    name: Optional[str] = None
    git_repo: Optional[str] = None
    platform: Optional[str] = None
    deploy_status: Optional[str] = None
    deploy_url: Optional[str] = None


@dataclass
class SiteCreated:
    site: Site
    html_url: str
    pages_url: str
    imported: int = 0
    total: int = 0


@dataclass
class SiteSummary:
    site: Site
    article_count: int = 0
    media_count: int = 0


async def _name_taken(ctx: AppContext, user_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
    q = select(Site.id).where(Site.user_id == user_id, Site.name == name)
    if exclude_id:
        q = q.where(Site.id != exclude_id)
    return (await ctx.session.execute(q)).first() is not None


async def create_site(ctx: AppContext, user_id: str, data: CreateSiteData) -> SiteCreated:
    name = validate_site_name(data.name)
    # Friendly early answer; the unique constraint below is the real guard
    if await _name_taken(ctx, user_id, name):
        raise DuplicateSiteNameError(name, user_id)

    token = await resolve_token(ctx, user_id)
    platform_user = await ctx.auth.fetch_user(token)

    description = data.description or f"Blog site: {name}"
    provisioned = await provisioning_service.provision(
        ctx,
        token,
        CreateRepoData(
            name=name,
            description=description,
            template_owner=data.template_owner or ctx.settings.template_owner,
            template_repo=data.template_repo or ctx.settings.template_repo,
        ),
        TemplateData(
            site_name=name,
            site_description=description,
            site_name_slug=slugify_site_name(name),
            site_author=data.author or platform_user.username,
            platform_username=platform_user.username,
        ),
    )

    site = Site(
        user_id=user_id,
        name=name,
        git_repo=provisioned.repo.full_name,
        platform=ctx.auth.platform,
        deploy_status=DEPLOY_DEPLOYED,
        deploy_url=provisioned.pages_url,
    )
    ctx.session.add(site)
    try:
        await ctx.session.commit()
    except IntegrityError:
        await ctx.session.rollback()
        logger.warning(f"Site name {name} taken for user {user_id}; repo {provisioned.repo.full_name} left in place")
        raise DuplicateSiteNameError(name, user_id)
    logger.info(f"Created site {site.name} ({site.id}) backed by {site.git_repo}")

    result = SiteCreated(site=site, html_url=provisioned.repo.html_url, pages_url=provisioned.pages_url)
    # A site without imported articles is still a successful site
    try:
        imported = await article_sync_service.import_from_repo(ctx, site.id, user_id)
        result.imported, result.total = imported.imported, imported.total
        logger.info(f"Imported {imported.imported}/{imported.total} articles for site {name}")
    except InlandError as e:
        logger.warning(f"Failed to import articles for site {name}: {e.message}")
    await ctx.session.refresh(site)
    return result


async def find_site(ctx: AppContext, site_id: str, user_id: str) -> SiteSummary:
    site = await get_owned_site(ctx, site_id, user_id)
    article_count = (
        await ctx.session.execute(select(func.count(Article.id)).where(Article.site_id == site.id))
    ).scalar_one()
    media_count = (
        await ctx.session.execute(select(func.count(Media.id)).where(Media.site_id == site.id))
    ).scalar_one()
    return SiteSummary(site=site, article_count=int(article_count or 0), media_count=int(media_count or 0))


async def list_user_sites(ctx: AppContext, user_id: str) -> List[SiteSummary]:
    rows = (
        await ctx.session.execute(
            select(Site, func.count(Article.id))
            .outerjoin(Article, Article.site_id == Site.id)
            .where(Site.user_id == user_id)
            .group_by(Site.id)
            .order_by(Site.updated_at.desc())
        )
    ).all()
    return [SiteSummary(site=site, article_count=int(count or 0)) for site, count in rows]


async def update_site(ctx: AppContext, site_id: str, user_id: str, data: UpdateSiteData) -> Site:
    site = await get_owned_site(ctx, site_id, user_id)

    # Validate everything before touching the row
    name = validate_site_name(data.name) if data.name is not None else None
    git_repo = validate_git_repo(data.git_repo) if data.git_repo is not None else None
    if name and name != site.name and await _name_taken(ctx, user_id, name, exclude_id=site.id):
        raise DuplicateSiteNameError(name, user_id)

    if name:
        site.name = name
    if git_repo:
        site.git_repo = git_repo
    if data.platform:
        site.platform = data.platform
    if data.deploy_status:
        site.deploy_status = data.deploy_status
    if data.deploy_url is not None:
        site.deploy_url = data.deploy_url or None
    site.updated_at = utcnow()

    try:
        await ctx.session.commit()
    except IntegrityError:
        await ctx.session.rollback()
        raise DuplicateSiteNameError(name or "", user_id)
    return site


async def delete_site(ctx: AppContext, site_id: str, user_id: str) -> Site:
    """Remove the site row (articles and media cascade). The hosted repository is kept."""
    site = await get_owned_site(ctx, site_id, user_id)
    await ctx.session.delete(site)
    await ctx.session.commit()
    logger.info(f"Deleted site {site.name} ({site.id}); repository {site.git_repo} left untouched")
    return site
