# FILE: inland/api/articles.py
import logging
from datetime import timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from inland.api.deps import get_context, get_current_user
from inland.core.context import AppContext
from inland.models.article import Article
from inland.models.site import Site
from inland.schemas.articles import (
    ArticleDeletedResponse,
    ArticleListResponse,
    ArticleResponse,
    ArticleSiteInfo,
    CreateArticleRequest,
    PublishResponse,
    RepoDeleteResponse,
    UpdateArticleRequest,
)
from inland.services import article_service

router = APIRouter(prefix="/api", tags=["articles"])
logger = logging.getLogger("inland.api")


def _article_response(article: Article, site: Optional[Site] = None) -> ArticleResponse:
    return ArticleResponse(
        id=article.id,
        site_id=article.site_id,
        title=article.title,
        slug=article.slug,
        content=article.content,
        status=article.status,
        created_at=article.created_at.replace(tzinfo=timezone.utc).isoformat(),
        updated_at=article.updated_at.replace(tzinfo=timezone.utc).isoformat(),
        site=ArticleSiteInfo(id=site.id, name=site.name, git_repo=site.git_repo) if site else None,
    )


@router.post("/articles", response_model=ArticleResponse, status_code=201)
async def create_article(
        data: CreateArticleRequest,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    article = await article_service.create_article(
        ctx,
        user["id"],
        article_service.CreateArticleData(
            site_id=data.site_id,
            title=data.title,
            content=data.content,
            slug=data.slug,
            status=data.status,
        ),
    )
    return _article_response(article)


@router.get("/articles", response_model=ArticleListResponse)
async def list_user_articles(
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    rows = await article_service.list_user_articles(ctx, user["id"])
    return ArticleListResponse(articles=[_article_response(a, s) for a, s in rows])


@router.get("/sites/{site_id}/articles", response_model=ArticleListResponse)
async def list_site_articles(
        site_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    articles = await article_service.list_site_articles(ctx, site_id, user["id"])
    return ArticleListResponse(articles=[_article_response(a) for a in articles])


@router.get("/articles/{article_id}", response_model=ArticleResponse)
async def get_article(
        article_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    article, site = await article_service.find_article(ctx, article_id, user["id"])
    return _article_response(article, site)


@router.put("/articles/{article_id}", response_model=ArticleResponse)
async def update_article(
        article_id: str,
        data: UpdateArticleRequest,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    article = await article_service.update_article(
        ctx, article_id, user["id"], article_service.UpdateArticleData(**data.model_dump(exclude_unset=True))
    )
    return _article_response(article)


@router.delete("/articles/{article_id}", response_model=ArticleDeletedResponse)
async def delete_article(
        article_id: str,
        remove_from_repo: bool = Query(True, description="Also delete the markdown file from the repository"),
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    result = await article_service.delete_article(ctx, article_id, user["id"], remove_from_repo)
    return ArticleDeletedResponse(
        article=_article_response(result.article),
        has_repo=result.has_repo,
        repo_deleted=result.repo_deleted,
        repo_reason=result.repo_reason,
        repo_error=result.repo_error,
    )


@router.post("/articles/{article_id}/publish", response_model=PublishResponse)
async def publish_article(
        article_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    result = await article_service.publish_article(ctx, article_id, user["id"])
    return PublishResponse(
        article=_article_response(result.article),
        published=result.published,
        file_path=result.file_path,
        commit_sha=result.commit_sha,
        was_update=result.was_update,
        removed_path=result.removed_path,
        orphan_error=result.orphan_error,
    )


@router.delete("/articles/{article_id}/repo", response_model=RepoDeleteResponse)
async def delete_article_from_repo(
        article_id: str,
        user=Depends(get_current_user),
        ctx: AppContext = Depends(get_context),
):
    result = await article_service.delete_article_from_repo(ctx, article_id, user["id"])
    return RepoDeleteResponse(deleted=result.deleted, reason=result.reason, file_path=result.file_path)
