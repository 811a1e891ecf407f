# FILE: inland/schemas/articles.py
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field


class CreateArticleRequest(BaseModel):
    site_id: str
    title: str
    content: str = ""
    slug: Optional[str] = Field(None, description="Generated from the title when omitted")
    status: Optional[Literal["draft", "published"]] = None


class UpdateArticleRequest(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    status: Optional[Literal["draft", "published"]] = None


class ArticleSiteInfo(BaseModel):
    id: str
    name: str
    git_repo: str


class ArticleResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    site_id: str
    title: str
    slug: str
    content: str
    status: str
    created_at: str
    updated_at: str
    site: Optional[ArticleSiteInfo] = None


class ArticleListResponse(BaseModel):
    articles: List[ArticleResponse]


class PublishResponse(BaseModel):
    message: str = "Article published successfully"
    article: ArticleResponse
    published: bool
    file_path: str
    commit_sha: str
    was_update: bool
    removed_path: Optional[str] = None
    orphan_error: Optional[str] = None


class ImportResponse(BaseModel):
    imported: int
    total: int
    failed: int = 0
    articles: List[ArticleResponse] = Field(default_factory=list)


class RepoDeleteResponse(BaseModel):
    deleted: bool
    reason: Optional[str] = None
    file_path: Optional[str] = None


class ArticleDeletedResponse(BaseModel):
    message: str = "Article deleted successfully"
    article: ArticleResponse
    has_repo: bool
    repo_deleted: bool = False
    repo_reason: Optional[str] = None
    repo_error: Optional[str] = None
