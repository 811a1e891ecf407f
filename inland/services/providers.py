# FILE: inland/services/providers.py
"""
Provider-agnostic interfaces for the Git hosting and identity collaborators.

The services only talk to these protocols; `GitHubClient` is the concrete
adapter wired in by the application.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Union


@dataclass(frozen=True)
class GitRepo:
    id: Union[int, str]
    name: str
    full_name: str
    html_url: str
    clone_url: str
    default_branch: str


@dataclass(frozen=True)
class ProvisionedRepo:
    repo: GitRepo
    pages_url: str
    files_updated: int = 0


@dataclass(frozen=True)
class TreeEntry:
    path: str
    type: str  # blob | tree | commit
    sha: str


@dataclass(frozen=True)
class RepoFile:
    path: str
    sha: str
    content: str  # base64, as returned by the provider


@dataclass(frozen=True)
class CreateRepoData:
    name: str
    description: str
    template_owner: str
    template_repo: str


@dataclass(frozen=True)
class TemplateData:
    site_name: str
    site_description: str
    site_name_slug: str
    site_author: str
    platform_username: str

    def placeholders(self) -> dict:
        return {
            "{{SITE_NAME}}": self.site_name,
            "{{SITE_DESCRIPTION}}": self.site_description,
            "{{SITE_NAME_SLUG}}": self.site_name_slug,
            "{{SITE_AUTHOR}}": self.site_author,
            "{{GITHUB_USERNAME}}": self.platform_username,
        }


@dataclass(frozen=True)
class PlatformUser:
    id: Union[int, str]
    username: str
    email: Optional[str]
    avatar_url: Optional[str]


@dataclass(frozen=True)
class UserEmail:
    email: str
    primary: bool
    verified: bool = False


@dataclass(frozen=True)
class TokenValidation:
    is_valid: bool
    reason: Optional[str] = None


class GitHostingProvider(Protocol):
    async def create_from_template(
        self, token: str, template_owner: str, template_repo: str, new_name: str, description: str
    ) -> GitRepo: ...

    async def get_repository(self, token: str, full_name: str) -> dict: ...

    async def list_tree(self, token: str, full_name: str, ref: str) -> List[TreeEntry]: ...

    async def get_file(self, token: str, full_name: str, path: str) -> RepoFile: ...

    async def put_file(
        self, token: str, full_name: str, path: str, content: str, message: str, sha: Optional[str] = None
    ) -> str: ...

    async def delete_file(self, token: str, full_name: str, path: str, sha: str, message: str) -> None: ...

    async def enable_pages_workflow(self, token: str, full_name: str) -> str: ...


class AuthProvider(Protocol):
    platform: str

    def oauth_url(self, state: str) -> str: ...

    async def exchange_code(self, code: str) -> str: ...

    async def fetch_user(self, token: str) -> PlatformUser: ...

    async def fetch_user_emails(self, token: str) -> Optional[List[UserEmail]]: ...

    async def fetch_primary_email(self, token: str) -> Optional[str]: ...

    async def validate_token(self, token: str) -> TokenValidation: ...
