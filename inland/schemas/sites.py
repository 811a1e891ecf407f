# FILE: inland/schemas/sites.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CreateSiteRequest(BaseModel):
    name: str = Field(..., description="Site name, also used as the repository name")
    description: Optional[str] = None
    author: Optional[str] = Field(None, description="Defaults to the GitHub username")
    template_owner: Optional[str] = None
    template_repo: Optional[str] = None


class UpdateSiteRequest(BaseModel):
    name: Optional[str] = None
    git_repo: Optional[str] = None
    platform: Optional[str] = None
    deploy_status: Optional[str] = None
    deploy_url: Optional[str] = None


class SiteResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    user_id: str
    name: str
    git_repo: str
    platform: str
    deploy_status: str
    deploy_url: Optional[str] = None
    created_at: str
    updated_at: str
    article_count: Optional[int] = None
    media_count: Optional[int] = None


class SiteCreatedResponse(BaseModel):
    site: SiteResponse
    github_url: str
    pages_url: str
    imported: int = 0
    total: int = 0


class SiteListResponse(BaseModel):
    sites: List[SiteResponse]
