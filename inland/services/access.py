"""Ownership checks shared by the site and article services."""
from typing import Tuple

from sqlalchemy import select

from inland.core.context import AppContext
from inland.core.errors import AccessDeniedError, NotFoundError, ValidationError
from inland.models.article import Article
from inland.models.site import Site


async def get_owned_site(ctx: AppContext, site_id: str, user_id: str) -> Site:
    site = (await ctx.session.execute(select(Site).where(Site.id == site_id))).scalar_one_or_none()
    if not site:
        raise NotFoundError("Site", site_id)
    if site.user_id != user_id:
        raise AccessDeniedError("Site", site_id, user_id)
    return site


async def get_owned_article(ctx: AppContext, article_id: str, user_id: str) -> Tuple[Article, Site]:
    row = (
        await ctx.session.execute(
            select(Article, Site).join(Site, Article.site_id == Site.id).where(Article.id == article_id)
        )
    ).one_or_none()
    if not row:
        raise NotFoundError("Article", article_id)
    article, site = row
    if site.user_id != user_id:
        raise AccessDeniedError("Article", article_id, user_id)
    return article, site


def require_repo(site: Site) -> str:
    if not site.git_repo:
        raise ValidationError("git_repo", "Site does not have a linked Git repository")
    return site.git_repo
