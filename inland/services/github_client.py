# FILE: inland/services/github_client.py
import base64
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

import httpx

from inland.core.config import Settings
from inland.core.errors import HostingAPIError
from inland.services.providers import (
    GitRepo,
    PlatformUser,
    RepoFile,
    TokenValidation,
    TreeEntry,
    UserEmail,
)

logger = logging.getLogger("inland.github")

GITHUB_OAUTH_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_OAUTH_TOKEN_URL = "https://github.com/login/oauth/access_token"
OAUTH_SCOPES = "repo,read:user,user:email"


def classify_status(status: int, body: str = "", headers: Optional[httpx.Headers] = None) -> str:
    """Map a non-2xx response onto the error kinds callers branch on."""
    if status == 404:
        return "not_found"
    if status == 409:
        return "conflict"
    if status == 422:
        return "unprocessable"
    if status == 401:
        return "unauthorized"
    if status in (403, 429):
        remaining = headers.get("x-ratelimit-remaining") if headers is not None else None
        if status == 429 or remaining == "0" or "rate limit" in body.lower():
            return "rate_limited"
        return "forbidden"
    if status >= 500:
        return "server_error"
    return "other"


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(encoded: str) -> str:
    # GitHub wraps base64 payloads at 60 columns
    return base64.b64decode("".join(encoded.split())).decode("utf-8")


def _repo_path(full_name: str) -> str:
    owner, _, repo = full_name.partition("/")
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _contents_path(full_name: str, path: str) -> str:
    return f"{_repo_path(full_name)}/contents/{quote(path, safe='/')}"


class GitHubClient:
    """
    Thin async wrapper over the GitHub REST API.

    Implements both GitHostingProvider and AuthProvider. Every call opens its
    own httpx.AsyncClient; `transport` lets tests plug in httpx.MockTransport.
    """

    platform = "github"

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def _client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.settings.http_timeout, **kwargs)

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.settings.github_api_version,
            "User-Agent": self.settings.user_agent,
        }

    async def request(
        self,
        token: str,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.settings.github_api_base}{path}"
        try:
            async with self._client() as client:
                resp = await client.request(method, url, json=json, params=params, headers=self._headers(token))
        except httpx.HTTPError as e:
            logger.warning(f"GitHub {method} {path} failed: {e}")
            raise HostingAPIError(None, f"GitHub API unreachable: {e}", "network") from e

        if resp.status_code >= 400:
            text = resp.text
            kind = classify_status(resp.status_code, text, resp.headers)
            raise HostingAPIError(resp.status_code, f"GitHub API error: {text}", kind)

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # ---------- repositories ----------

    async def create_from_template(
        self, token: str, template_owner: str, template_repo: str, new_name: str, description: str
    ) -> GitRepo:
        data = await self.request(
            token,
            "POST",
            f"{_repo_path(f'{template_owner}/{template_repo}')}/generate",
            json={"name": new_name, "description": description, "private": False},
        )
        logger.info(f"Created repository {data['full_name']} from {template_owner}/{template_repo}")
        return GitRepo(
            id=data["id"],
            name=data["name"],
            full_name=data["full_name"],
            html_url=data["html_url"],
            clone_url=data.get("clone_url", ""),
            default_branch=data.get("default_branch") or "main",
        )

    async def get_repository(self, token: str, full_name: str) -> Dict[str, Any]:
        info = await self.request(token, "GET", _repo_path(full_name))
        info["default_branch"] = info.get("default_branch") or "main"
        return info

    async def list_tree(self, token: str, full_name: str, ref: str) -> List[TreeEntry]:
        data = await self.request(
            token,
            "GET",
            f"{_repo_path(full_name)}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        return [
            TreeEntry(path=item["path"], type=item["type"], sha=item["sha"])
            for item in data.get("tree", [])
        ]

    async def get_file(self, token: str, full_name: str, path: str) -> RepoFile:
        data = await self.request(token, "GET", _contents_path(full_name, path))
        return RepoFile(path=data.get("path", path), sha=data["sha"], content=data.get("content", ""))

    async def put_file(
        self, token: str, full_name: str, path: str, content: str, message: str, sha: Optional[str] = None
    ) -> str:
        body: Dict[str, Any] = {"message": message, "content": encode_content(content)}
        if sha:
            body["sha"] = sha
        data = await self.request(token, "PUT", _contents_path(full_name, path), json=body)
        return data["commit"]["sha"]

    async def delete_file(self, token: str, full_name: str, path: str, sha: str, message: str) -> None:
        await self.request(
            token,
            "DELETE",
            _contents_path(full_name, path),
            json={"message": message, "sha": sha},
        )

    async def enable_pages_workflow(self, token: str, full_name: str) -> str:
        await self.request(token, "POST", f"{_repo_path(full_name)}/pages", json={"build_type": "workflow"})
        owner, _, repo = full_name.partition("/")
        return f"https://{owner}.github.io/{repo}"

    # ---------- identity ----------

    def oauth_url(self, state: str) -> str:
        """Generate GitHub OAuth authorization URL."""
        query = urlencode(
            {
                "client_id": self.settings.github_client_id,
                "redirect_uri": self.settings.auth_callback_url,
                "scope": OAUTH_SCOPES,
                "state": state,
            }
        )
        return f"{GITHUB_OAUTH_AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> str:
        """Exchange OAuth code for access token."""
        try:
            async with self._client() as client:
                resp = await client.post(
                    GITHUB_OAUTH_TOKEN_URL,
                    data={
                        "client_id": self.settings.github_client_id,
                        "client_secret": self.settings.github_client_secret,
                        "code": code,
                    },
                    headers={"Accept": "application/json", "User-Agent": self.settings.user_agent},
                )
        except httpx.HTTPError as e:
            raise HostingAPIError(None, f"GitHub OAuth unreachable: {e}", "network") from e

        if resp.status_code >= 400:
            raise HostingAPIError(resp.status_code, f"GitHub OAuth error: {resp.text}", classify_status(resp.status_code))
        data = resp.json()
        if "error" in data or not data.get("access_token"):
            raise HostingAPIError(
                400, data.get("error_description") or data.get("error") or "No access token returned", "unauthorized"
            )
        return data["access_token"]

    async def fetch_user(self, token: str) -> PlatformUser:
        data = await self.request(token, "GET", "/user")
        return PlatformUser(
            id=data["id"],
            username=data["login"],
            email=data.get("email"),
            avatar_url=data.get("avatar_url"),
        )

    async def fetch_user_emails(self, token: str) -> Optional[List[UserEmail]]:
        # Email is optional profile data: failures are not propagated
        try:
            data = await self.request(token, "GET", "/user/emails")
        except HostingAPIError as e:
            logger.warning(f"Could not fetch GitHub emails: {e.kind} ({e.status})")
            return None
        if not isinstance(data, list):
            return None
        return [
            UserEmail(email=e["email"], primary=bool(e.get("primary")), verified=bool(e.get("verified")))
            for e in data
            if e.get("email")
        ]

    async def fetch_primary_email(self, token: str) -> Optional[str]:
        emails = await self.fetch_user_emails(token)
        if not emails:
            return None
        primary = next((e for e in emails if e.primary), None)
        return primary.email if primary else None

    async def validate_token(self, token: str) -> TokenValidation:
        try:
            await self.request(token, "GET", "/user")
        except HostingAPIError as e:
            if e.kind == "unauthorized":
                return TokenValidation(False, "GitHub token is invalid or expired")
            return TokenValidation(False, "GitHub token validation failed")
        return TokenValidation(True)
