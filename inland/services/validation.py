import re

from inland.core.errors import ValidationError
from inland.models.article import STATUS_DRAFT, STATUS_PUBLISHED

SITE_NAME_MAX = 100
TITLE_MAX = 200
SLUG_MAX = 100

_SITE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9\-_.]+$")
_GIT_REPO_PATTERN = re.compile(r"^[A-Za-z0-9\-_.]+/[A-Za-z0-9\-_.]+$")
_SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


def validate_site_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name", "Site name cannot be empty")
    if len(name) > SITE_NAME_MAX:
        raise ValidationError("name", f"Site name cannot exceed {SITE_NAME_MAX} characters")
    if not _SITE_NAME_PATTERN.match(name):
        raise ValidationError(
            "name", "Site name can only contain letters, numbers, hyphens, underscores, and dots"
        )
    return name


def validate_git_repo(git_repo: str) -> str:
    git_repo = (git_repo or "").strip()
    if not git_repo:
        raise ValidationError("git_repo", "Git repository cannot be empty")
    if not _GIT_REPO_PATTERN.match(git_repo):
        raise ValidationError("git_repo", "Git repository must be in format: username/repository-name")
    return git_repo


def validate_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("title", "Article title cannot be empty")
    if len(title) > TITLE_MAX:
        raise ValidationError("title", f"Article title cannot exceed {TITLE_MAX} characters")
    # the title is written on a single front matter line
    if "\n" in title or "\r" in title:
        raise ValidationError("title", "Article title must be a single line")
    return title


def validate_slug(slug: str) -> str:
    slug = (slug or "").strip()
    if not slug:
        raise ValidationError("slug", "Article slug cannot be empty")
    if not _SLUG_PATTERN.match(slug):
        raise ValidationError("slug", "Article slug can only contain lowercase letters, numbers, and hyphens")
    if len(slug) > SLUG_MAX:
        raise ValidationError("slug", f"Article slug cannot exceed {SLUG_MAX} characters")
    return slug


def generate_slug(title: str) -> str:
    """URL-friendly slug from an article title."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("slug", "Cannot generate slug from empty title")
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")[:SLUG_MAX].strip("-")
    if not slug:
        raise ValidationError("slug", "Title contains no valid slug characters")
    return slug


def validate_status(status: str) -> str:
    if status not in (STATUS_DRAFT, STATUS_PUBLISHED):
        raise ValidationError("status", "Status must be 'draft' or 'published'")
    return status


def slugify_site_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())
