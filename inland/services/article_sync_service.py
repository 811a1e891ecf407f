# FILE: inland/services/article_sync_service.py
"""
Database <-> repository synchronization for articles.

The database row is authoritative. The hosted markdown file is a projection
that is only reconciled on explicit import, publish and delete actions.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from inland.core.context import AppContext
from inland.core.database import utcnow
from inland.core.errors import HostingAPIError, InlandError, ValidationError
from inland.models.article import STATUS_PUBLISHED, Article
from inland.services.access import get_owned_article, get_owned_site, require_repo
from inland.services.github_client import decode_content
from inland.services.markdown_service import (
    ImportedArticle,
    article_path,
    is_article_path,
    parse_article,
    render_article,
)
from inland.services.providers import RepoFile
from inland.services.token_service import resolve_token
from inland.services.validation import validate_slug

logger = logging.getLogger("inland.articles")

NO_REPOSITORY = "no linked repository"
FILE_NOT_FOUND = "File not found"


@dataclass
class ImportResult:
    imported: int
    total: int
    articles: List[Article] = field(default_factory=list)
    failed: int = 0


@dataclass
class PublishResult:
    article: Article
    published: bool
    file_path: str
    commit_sha: str
    was_update: bool
    removed_path: Optional[str] = None
    orphan_error: Optional[str] = None


@dataclass
class RepoDeleteResult:
    deleted: bool
    reason: Optional[str] = None
    file_path: Optional[str] = None


async def get_file_or_none(ctx: AppContext, token: str, full_name: str, path: str) -> Optional[RepoFile]:
    """404 means "no file", every other failure propagates."""
    try:
        return await ctx.hosting.get_file(token, full_name, path)
    except HostingAPIError as e:
        if e.is_not_found:
            return None
        raise


async def _fetch_markdown(ctx: AppContext, token: str, full_name: str, ref: str):
    entries = await ctx.hosting.list_tree(token, full_name, ref)
    paths = [e.path for e in entries if e.type == "blob" and is_article_path(e.path)]
    logger.info(f"Found {len(paths)} markdown file(s) in {full_name}")

    parsed: List[Tuple[str, ImportedArticle]] = []
    failed = 0
    # one request at a time per user token
    for path in paths:
        try:
            remote = await ctx.hosting.get_file(token, full_name, path)
            parsed.append((path, parse_article(decode_content(remote.content), path)))
        except (InlandError, ValueError) as e:
            failed += 1
            logger.warning(f"Failed to fetch {path} from {full_name}: {e}")
    return paths, parsed, failed


async def import_from_repo(ctx: AppContext, site_id: str, user_id: str) -> ImportResult:
    site = await get_owned_site(ctx, site_id, user_id)
    full_name = require_repo(site)
    site_id = site.id

    token = await resolve_token(ctx, user_id)
    repo_info = await ctx.hosting.get_repository(token, full_name)
    paths, parsed, failed = await _fetch_markdown(ctx, token, full_name, repo_info["default_branch"])

    imported_ids: List[str] = []
    seen = set()
    for path, data in parsed:
        try:
            validate_slug(data.slug)
        except ValidationError as e:
            failed += 1
            logger.warning(f"Skipping {path}: {e.message} ({data.slug!r})")
            continue
        if data.slug in seen:
            logger.info(f"Skipping duplicate slug in repository: {data.slug} ({path})")
            continue
        seen.add(data.slug)

        existing = (
            await ctx.session.execute(
                select(Article.id).where(Article.site_id == site_id, Article.slug == data.slug)
            )
        ).scalar_one_or_none()
        if existing:
            logger.info(f"Skipping existing article: {data.slug}")
            continue

        article = Article(
            site_id=site_id,
            title=data.title,
            slug=data.slug,
            content=data.content,
            status=data.status,
            repo_path=path,
        )
        ctx.session.add(article)
        try:
            await ctx.session.commit()
        except IntegrityError as e:
            await ctx.session.rollback()
            failed += 1
            logger.warning(f"Failed to import article {data.slug}: {e.orig}")
            continue
        imported_ids.append(article.id)
        logger.info(f"Imported article: {data.title}")

    articles: List[Article] = []
    if imported_ids:
        articles = list(
            (
                await ctx.session.execute(
                    select(Article).where(Article.id.in_(imported_ids)).order_by(Article.slug)
                )
            ).scalars().all()
        )

    logger.info(f"Imported {len(imported_ids)}/{len(paths)} articles from {full_name}")
    return ImportResult(imported=len(imported_ids), total=len(paths), articles=articles, failed=failed)


async def publish(ctx: AppContext, article_id: str, user_id: str) -> PublishResult:
    article, site = await get_owned_article(ctx, article_id, user_id)
    full_name = require_repo(site)
    token = await resolve_token(ctx, user_id)

    file_path = article_path(article.slug)
    markdown = render_article(article.title, article.content)

    existing = await get_file_or_none(ctx, token, full_name, file_path)
    sha = existing.sha if existing else None
    message = f"{'Update' if sha else 'Add'} article: {article.slug}"
    commit_sha = await ctx.hosting.put_file(token, full_name, file_path, markdown, message, sha)
    logger.info(f"Article published to Git repository: {article.title} -> {file_path}")

    # Slug changed since the last publish: remove the file under the old name
    removed_path = None
    orphan_error = None
    old_path = article.repo_path
    if old_path and old_path != file_path:
        try:
            old = await get_file_or_none(ctx, token, full_name, old_path)
            if old:
                await ctx.hosting.delete_file(
                    token, full_name, old_path, old.sha, f"Move article: {old_path} -> {file_path}"
                )
                removed_path = old_path
        except InlandError as e:
            orphan_error = e.message
            logger.warning(f"Could not remove previous file {old_path}: {e.message}")

    article.status = STATUS_PUBLISHED
    article.repo_path = file_path
    article.updated_at = utcnow()
    await ctx.session.commit()

    return PublishResult(
        article=article,
        published=True,
        file_path=file_path,
        commit_sha=commit_sha,
        was_update=sha is not None,
        removed_path=removed_path,
        orphan_error=orphan_error,
    )


async def delete_from_repo(ctx: AppContext, article_id: str, user_id: str) -> RepoDeleteResult:
    article, site = await get_owned_article(ctx, article_id, user_id)
    if not site.git_repo:
        return RepoDeleteResult(deleted=False, reason=NO_REPOSITORY)

    token = await resolve_token(ctx, user_id)
    file_path = article.repo_path or article_path(article.slug)

    current = await get_file_or_none(ctx, token, site.git_repo, file_path)
    if not current:
        logger.info(f"Nothing to delete for {article.slug}: {file_path} not in {site.git_repo}")
        return RepoDeleteResult(deleted=False, reason=FILE_NOT_FOUND)

    await ctx.hosting.delete_file(token, site.git_repo, file_path, current.sha, f"Delete article: {article.slug}")
    logger.info(f"Article deleted from Git repository: {article.title} -> {file_path}")

    if article.repo_path:
        article.repo_path = None
        await ctx.session.commit()
    return RepoDeleteResult(deleted=True, file_path=file_path)
