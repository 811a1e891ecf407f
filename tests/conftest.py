"""Shared fixtures: in-memory database, fake GitHub and a ready AppContext."""
import itertools
from typing import Dict, List, Optional

import pytest
from cryptography.fernet import Fernet

from inland.core.config import Settings
from inland.core.context import AppContext
from inland.core.database import init_models, make_engine, make_sessionmaker
from inland.core.errors import HostingAPIError
from inland.models.git_integration import GitIntegration
from inland.models.site import Site
from inland.models.user import User
from inland.services.encryption_service import encrypt_token
from inland.services.github_client import encode_content
from inland.services.providers import (
    GitRepo,
    PlatformUser,
    RepoFile,
    TokenValidation,
    TreeEntry,
    UserEmail,
)

VALID_TOKEN = "gho_valid"


def not_found(path: str = "") -> HostingAPIError:
    return HostingAPIError(404, f'GitHub API error: {{"message": "Not Found", "path": "{path}"}}', "not_found")


class FakeGitHub:
    """In-memory stand-in for GitHubClient (both provider roles)."""

    platform = "github"

    def __init__(self):
        self.username = "octocat"
        self.repos: Dict[str, Dict] = {}
        self.template_files: Dict[str, str] = {}
        self.valid_tokens = {VALID_TOKEN}
        self.calls: List[tuple] = []
        self.tree_errors: List[Exception] = []
        self.errors: Dict[str, Exception] = {}
        self._seq = itertools.count(1)

    # ---- helpers ----

    def add_repo(self, full_name: str, files: Optional[Dict[str, str]] = None, default_branch: str = "main"):
        self.repos[full_name] = {"default_branch": default_branch, "files": {}}
        for path, text in (files or {}).items():
            self.repos[full_name]["files"][path] = (text, self._sha())
        return self.repos[full_name]

    def text(self, full_name: str, path: str) -> Optional[str]:
        entry = self.repos[full_name]["files"].get(path)
        return entry[0] if entry else None

    def ops(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    def _sha(self) -> str:
        return f"sha{next(self._seq)}"

    def _enter(self, op: str, *args):
        self.calls.append((op, *args))
        if op in self.errors:
            raise self.errors[op]

    # ---- hosting ----

    async def create_from_template(self, token, template_owner, template_repo, new_name, description):
        self._enter("create_from_template", template_owner, template_repo, new_name, description)
        full_name = f"{self.username}/{new_name}"
        if full_name in self.repos:
            raise HostingAPIError(422, "GitHub API error: name already exists on this account", "unprocessable")
        self.add_repo(full_name, dict(self.template_files))
        return GitRepo(
            id=len(self.repos),
            name=new_name,
            full_name=full_name,
            html_url=f"https://github.com/{full_name}",
            clone_url=f"https://github.com/{full_name}.git",
            default_branch="main",
        )

    async def get_repository(self, token, full_name):
        self._enter("get_repository", full_name)
        if full_name not in self.repos:
            raise not_found(full_name)
        return {"full_name": full_name, "default_branch": self.repos[full_name]["default_branch"]}

    async def list_tree(self, token, full_name, ref):
        self._enter("list_tree", full_name, ref)
        if self.tree_errors:
            raise self.tree_errors.pop(0)
        files = self.repos[full_name]["files"]
        return [TreeEntry(path=p, type="blob", sha=sha) for p, (_t, sha) in sorted(files.items())]

    async def get_file(self, token, full_name, path):
        self._enter("get_file", full_name, path)
        entry = self.repos.get(full_name, {"files": {}})["files"].get(path)
        if not entry:
            raise not_found(path)
        text, sha = entry
        return RepoFile(path=path, sha=sha, content=encode_content(text))

    async def put_file(self, token, full_name, path, content, message, sha=None):
        self._enter("put_file", full_name, path, message, sha)
        files = self.repos[full_name]["files"]
        if path in files and files[path][1] != sha:
            raise HostingAPIError(409, "GitHub API error: sha does not match", "conflict")
        files[path] = (content, self._sha())
        return f"commit-{next(self._seq)}"

    async def delete_file(self, token, full_name, path, sha, message):
        self._enter("delete_file", full_name, path, sha, message)
        files = self.repos[full_name]["files"]
        if path not in files:
            raise not_found(path)
        del files[path]

    async def enable_pages_workflow(self, token, full_name):
        self._enter("enable_pages_workflow", full_name)
        owner, _, repo = full_name.partition("/")
        return f"https://{owner}.github.io/{repo}"

    # ---- identity ----

    def oauth_url(self, state):
        return f"https://github.com/login/oauth/authorize?state={state}"

    async def exchange_code(self, code):
        self._enter("exchange_code", code)
        return VALID_TOKEN

    async def fetch_user(self, token):
        self._enter("fetch_user")
        return PlatformUser(id=1, username=self.username, email=None, avatar_url="https://avatars/1")

    async def fetch_user_emails(self, token):
        return [UserEmail(email="octo@example.com", primary=True, verified=True)]

    async def fetch_primary_email(self, token):
        return "octo@example.com"

    async def validate_token(self, token):
        self.calls.append(("validate_token",))
        if token in self.valid_tokens:
            return TokenValidation(True)
        return TokenValidation(False, "GitHub token is invalid or expired")


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret="test-secret",
        encryption_key=Fernet.generate_key().decode(),
    )


@pytest.fixture
async def engine(settings):
    engine = make_engine(settings.database_url)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    async with make_sessionmaker(engine)() as session:
        yield session


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def ctx(settings, session, github, sleep):
    return AppContext(settings=settings, session=session, hosting=github, auth=github, sleep=sleep)


async def make_user(ctx: AppContext, username: str = "octocat", token: Optional[str] = VALID_TOKEN) -> User:
    user = User(username=username)
    ctx.session.add(user)
    await ctx.session.flush()
    if token is not None:
        ctx.session.add(
            GitIntegration(
                user_id=user.id,
                platform="github",
                platform_username=username,
                access_token=encrypt_token(ctx.settings, token) if token else "",
            )
        )
    await ctx.session.commit()
    return user


async def make_site(ctx: AppContext, user: User, name: str = "blog", git_repo: str = "octocat/blog") -> Site:
    site = Site(user_id=user.id, name=name, git_repo=git_repo, deploy_status="deployed")
    ctx.session.add(site)
    await ctx.session.commit()
    return site


@pytest.fixture
async def owner(ctx):
    return await make_user(ctx)


@pytest.fixture
async def stranger(ctx):
    return await make_user(ctx, "mallory", token="gho_mallory")
