import pytest

from inland.core.errors import ValidationError
from inland.services.validation import (
    generate_slug,
    slugify_site_name,
    validate_git_repo,
    validate_site_name,
    validate_slug,
    validate_status,
    validate_title,
)


def test_site_name_trimmed():
    assert validate_site_name("  my-blog.v2_x  ") == "my-blog.v2_x"


@pytest.mark.parametrize("name", ["", "   ", "has space", "slash/name", "x" * 101])
def test_site_name_rejected(name):
    with pytest.raises(ValidationError) as exc:
        validate_site_name(name)
    assert exc.value.field == "name"


def test_git_repo_format():
    assert validate_git_repo("octocat/hello-world") == "octocat/hello-world"
    with pytest.raises(ValidationError):
        validate_git_repo("no-slash")
    with pytest.raises(ValidationError):
        validate_git_repo("a/b/c")


def test_title_rules():
    assert validate_title("  Hello  ") == "Hello"
    assert validate_title("t" * 200) == "t" * 200
    for bad in ["", "t" * 201, "two\nlines"]:
        with pytest.raises(ValidationError) as exc:
            validate_title(bad)
        assert exc.value.field == "title"


def test_slug_rules():
    assert validate_slug("hello-world-2") == "hello-world-2"
    for bad in ["", "Hello", "with space", "under_score", "a" * 101]:
        with pytest.raises(ValidationError):
            validate_slug(bad)


@pytest.mark.parametrize(
    "title,slug",
    [
        ("Hello World", "hello-world"),
        ("  Hello,   World!  ", "hello-world"),
        ("C'est la vie -- part 2", "cest-la-vie-part-2"),
        ("---Edge---", "edge"),
    ],
)
def test_generate_slug(title, slug):
    assert generate_slug(title) == slug


def test_generate_slug_needs_usable_characters():
    with pytest.raises(ValidationError):
        generate_slug("!!!")
    with pytest.raises(ValidationError):
        generate_slug("   ")


def test_generate_slug_is_capped():
    slug = generate_slug("word " * 60)
    assert len(slug) <= 100
    assert not slug.endswith("-")
    validate_slug(slug)


def test_status():
    assert validate_status("draft") == "draft"
    assert validate_status("published") == "published"
    with pytest.raises(ValidationError):
        validate_status("archived")


def test_slugify_site_name():
    assert slugify_site_name("My.Blog_2") == "my-blog-2"
