# FILE: inland/services/article_service.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from inland.core.context import AppContext
from inland.core.database import utcnow
from inland.core.errors import DuplicateSlugError, InlandError
from inland.models.article import STATUS_DRAFT, Article
from inland.models.site import Site
from inland.services import article_sync_service
from inland.services.access import get_owned_article, get_owned_site
from inland.services.article_sync_service import ImportResult, PublishResult, RepoDeleteResult
from inland.services.validation import generate_slug, validate_slug, validate_status, validate_title

logger = logging.getLogger("inland.articles")


@dataclass
class CreateArticleData:
    site_id: str
    title: str
    content: str = ""
    slug: Optional[str] = None
    status: Optional[str] = None


@dataclass
class UpdateArticleData:
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    status: Optional[str] = None


@dataclass
class ArticleDeleted:
    article: Article
    has_repo: bool
    repo_deleted: bool = False
    repo_reason: Optional[str] = None
    repo_error: Optional[str] = None


async def create_article(ctx: AppContext, user_id: str, data: CreateArticleData) -> Article:
    title = validate_title(data.title)
    slug = validate_slug(data.slug) if data.slug else generate_slug(title)
    status = validate_status(data.status) if data.status else STATUS_DRAFT

    site = await get_owned_site(ctx, data.site_id, user_id)

    article = Article(site_id=site.id, title=title, slug=slug, content=data.content or "", status=status)
    ctx.session.add(article)
    try:
        await ctx.session.commit()
    except IntegrityError:
        await ctx.session.rollback()
        raise DuplicateSlugError(slug, data.site_id)
    logger.info(f"Created article {slug} in site {data.site_id}")
    return article


async def find_article(ctx: AppContext, article_id: str, user_id: str) -> Tuple[Article, Site]:
    return await get_owned_article(ctx, article_id, user_id)


async def list_site_articles(ctx: AppContext, site_id: str, user_id: str) -> List[Article]:
    site = await get_owned_site(ctx, site_id, user_id)
    rows = (
        await ctx.session.execute(
            select(Article).where(Article.site_id == site.id).order_by(Article.updated_at.desc())
        )
    ).scalars().all()
    return list(rows)


async def list_user_articles(ctx: AppContext, user_id: str) -> List[Tuple[Article, Site]]:
    rows = (
        await ctx.session.execute(
            select(Article, Site)
            .join(Site, Article.site_id == Site.id)
            .where(Site.user_id == user_id)
            .order_by(Article.updated_at.desc())
        )
    ).all()
    return [(article, site) for article, site in rows]


async def update_article(ctx: AppContext, article_id: str, user_id: str, data: UpdateArticleData) -> Article:
    article, site = await get_owned_article(ctx, article_id, user_id)
    site_id = site.id

    title = validate_title(data.title) if data.title is not None else None
    slug = validate_slug(data.slug) if data.slug is not None else None
    status = validate_status(data.status) if data.status is not None else None

    if title:
        article.title = title
    if slug:
        # the hosted file keeps its old name until the next publish moves it
        article.slug = slug
    if data.content is not None:
        article.content = data.content
    if status:
        article.status = status
    article.updated_at = utcnow()

    try:
        await ctx.session.commit()
    except IntegrityError:
        await ctx.session.rollback()
        raise DuplicateSlugError(slug or "", site_id)
    return article


async def delete_article(
    ctx: AppContext, article_id: str, user_id: str, remove_from_repo: bool = True
) -> ArticleDeleted:
    """
    Delete the article row, after a best-effort removal of its hosted file.

    The remote outcome never blocks the database delete: a failure is logged
    and reported on the result.
    """
    article, site = await get_owned_article(ctx, article_id, user_id)
    result = ArticleDeleted(article=article, has_repo=bool(site.git_repo))

    if remove_from_repo and site.git_repo:
        try:
            remote = await article_sync_service.delete_from_repo(ctx, article_id, user_id)
            result.repo_deleted = remote.deleted
            result.repo_reason = remote.reason
        except InlandError as e:
            result.repo_error = e.message
            logger.warning(f"Could not delete {article.slug} from {site.git_repo}: {e.message}")
        except Exception as e:
            result.repo_error = str(e) or type(e).__name__
            logger.warning(f"Unexpected error deleting {article.slug} from {site.git_repo}: {e}", exc_info=True)

    await ctx.session.delete(article)
    await ctx.session.commit()
    logger.info(f"Deleted article {article.slug} ({article_id})")
    return result


async def publish_article(ctx: AppContext, article_id: str, user_id: str) -> PublishResult:
    return await article_sync_service.publish(ctx, article_id, user_id)


async def import_articles_from_repo(ctx: AppContext, site_id: str, user_id: str) -> ImportResult:
    return await article_sync_service.import_from_repo(ctx, site_id, user_id)


async def delete_article_from_repo(ctx: AppContext, article_id: str, user_id: str) -> RepoDeleteResult:
    return await article_sync_service.delete_from_repo(ctx, article_id, user_id)
