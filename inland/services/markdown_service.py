# FILE: inland/services/markdown_service.py
"""
Article <-> markdown file translation.

Hosted files look like:

    ---
    title: Hello
    date: 2025-01-31
    excerpt: First words of the body...
    ---

    raw body
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from inland.models.article import STATUS_DRAFT, STATUS_PUBLISHED

CONTENT_DIR = "content/"
MARKDOWN_EXT = ".md"

EXCERPT_LENGTH = 150
EXCERPT_MIN_WORD_BREAK = 100

_FRONT_MATTER = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n(.*)$", re.DOTALL)

_MARKDOWN_STRIP = [
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),           # headers
    (re.compile(r"\*{1,2}([^*]+)\*{1,2}"), r"\1"),           # bold / italic
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),           # links
    (re.compile(r"`([^`]+)`"), r"\1"),                       # inline code
    (re.compile(r"^>\s+", re.MULTILINE), ""),                # blockquotes
    (re.compile(r"^[ \t]*[-*+]\s+", re.MULTILINE), ""),      # bullets
    (re.compile(r"^[ \t]*\d+\.\s+", re.MULTILINE), ""),      # numbered lists
]


@dataclass(frozen=True)
class ImportedArticle:
    title: str
    slug: str
    content: str
    status: str


def article_path(slug: str) -> str:
    return f"{CONTENT_DIR}{slug}{MARKDOWN_EXT}"


def is_article_path(path: str) -> bool:
    return path.startswith(CONTENT_DIR) and path.endswith(MARKDOWN_EXT)


def slug_from_path(path: str) -> str:
    slug = path[len(CONTENT_DIR):] if path.startswith(CONTENT_DIR) else path
    if slug.endswith(MARKDOWN_EXT):
        slug = slug[: -len(MARKDOWN_EXT)]
    return slug


def title_from_slug(slug: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), slug.replace("-", " "))


def generate_excerpt(content: str) -> str:
    """Plain-text summary of a markdown body, at most 150 chars plus '...'."""
    text = content
    for pattern, repl in _MARKDOWN_STRIP:
        text = pattern.sub(repl, text)
    text = re.sub(r"\s+", " ", text).strip()

    if len(text) <= EXCERPT_LENGTH:
        return text

    truncated = text[:EXCERPT_LENGTH]
    last_space = truncated.rfind(" ")
    if last_space > EXCERPT_MIN_WORD_BREAK:
        return truncated[:last_space] + "..."
    return truncated + "..."


def render_article(title: str, content: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return (
        "---\n"
        f"title: {title}\n"
        f"date: {today.isoformat()}\n"
        f"excerpt: {generate_excerpt(content)}\n"
        "---\n"
        "\n"
        f"{content}"
    )


def parse_front_matter(block: str) -> Dict[str, str]:
    """Flat `key: value` lines only. No nesting, no quoting rules."""
    fields: Dict[str, str] = {}
    for line in block.split("\n"):
        idx = line.find(":")
        if idx > 0:
            fields[line[:idx].strip()] = line[idx + 1:].strip()
    return fields


def parse_article(text: str, path: str) -> ImportedArticle:
    slug = slug_from_path(path)
    text = text.replace("\r\n", "\n")
    match = _FRONT_MATTER.match(text)
    if not match:
        return ImportedArticle(
            title=title_from_slug(slug),
            slug=slug,
            content=text.strip(),
            status=STATUS_PUBLISHED,
        )

    fields = parse_front_matter(match.group(1))
    body = match.group(2)
    # drop the blank separator line written by render_article
    if body.startswith("\n"):
        body = body[1:]

    return ImportedArticle(
        title=fields.get("title") or title_from_slug(slug),
        slug=fields.get("slug") or slug,
        content=body,
        status=STATUS_DRAFT if fields.get("status") == STATUS_DRAFT else STATUS_PUBLISHED,
    )
