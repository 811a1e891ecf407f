import base64
import json

import httpx
import pytest

from inland.core.config import Settings
from inland.core.errors import HostingAPIError
from inland.services.github_client import GitHubClient, classify_status, decode_content, encode_content


def make_client(handler):
    return GitHubClient(Settings(github_client_id="cid"), transport=httpx.MockTransport(handler))


async def test_request_sends_github_headers():
    seen = {}

    def handler(request: httpx.Request):
        seen["request"] = request
        return httpx.Response(200, json={"id": 7, "login": "octocat", "avatar_url": "a"})

    user = await make_client(handler).fetch_user("tok")

    req = seen["request"]
    assert req.url == httpx.URL("https://api.github.com/user")
    assert req.headers["Authorization"] == "Bearer tok"
    assert req.headers["Accept"] == "application/vnd.github+json"
    assert req.headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert req.headers["User-Agent"] == "Inland-CMS/1.0"
    assert user.username == "octocat"
    assert user.email is None


async def test_create_from_template_posts_generate():
    captured = {}

    def handler(request):
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            201,
            json={
                "id": 1,
                "name": "blog",
                "full_name": "octocat/blog",
                "html_url": "https://github.com/octocat/blog",
                "clone_url": "https://github.com/octocat/blog.git",
                "default_branch": "trunk",
            },
        )

    repo = await make_client(handler).create_from_template("tok", "Saul-Mirone", "inland-template-basic", "blog", "d")

    assert captured["path"] == "/repos/Saul-Mirone/inland-template-basic/generate"
    assert captured["body"] == {"name": "blog", "description": "d", "private": False}
    assert repo.full_name == "octocat/blog"
    assert repo.default_branch == "trunk"


async def test_put_file_base64_encodes_and_returns_commit_sha():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"content": {"sha": "blob"}, "commit": {"sha": "c0ffee"}})

    sha = await make_client(handler).put_file("tok", "o/r", "content/héllo.md", "Grüße\n", "Add article: x", "old")

    assert captured["method"] == "PUT"
    assert captured["path"] == "/repos/o/r/contents/content/héllo.md"
    assert base64.b64decode(captured["body"]["content"]).decode("utf-8") == "Grüße\n"
    assert captured["body"]["sha"] == "old"
    assert captured["body"]["message"] == "Add article: x"
    assert sha == "c0ffee"


async def test_put_file_without_sha_omits_it():
    captured = {}

    def handler(request):
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"commit": {"sha": "c1"}})

    await make_client(handler).put_file("tok", "o/r", "content/a.md", "x", "Add article: a")
    assert "sha" not in captured["body"]


async def test_get_file_and_wrapped_base64():
    wrapped = encode_content("hello world " * 10)
    wrapped = "\n".join(wrapped[i:i + 60] for i in range(0, len(wrapped), 60))

    def handler(request):
        return httpx.Response(200, json={"path": "content/a.md", "sha": "s1", "content": wrapped})

    remote = await make_client(handler).get_file("tok", "o/r", "content/a.md")
    assert remote.sha == "s1"
    assert decode_content(remote.content) == "hello world " * 10


async def test_list_tree_is_recursive():
    captured = {}

    def handler(request):
        captured["url"] = request.url
        return httpx.Response(
            200,
            json={"tree": [{"path": "content", "type": "tree", "sha": "t"}, {"path": "content/a.md", "type": "blob", "sha": "b"}]},
        )

    entries = await make_client(handler).list_tree("tok", "o/r", "main")
    assert captured["url"].path == "/repos/o/r/git/trees/main"
    assert captured["url"].params["recursive"] == "1"
    assert [(e.path, e.type) for e in entries] == [("content", "tree"), ("content/a.md", "blob")]


async def test_delete_file_sends_sha_and_handles_empty_body():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"")

    assert await make_client(handler).delete_file("tok", "o/r", "content/a.md", "s1", "Delete article: a") is None
    assert captured["method"] == "DELETE"
    assert captured["body"] == {"message": "Delete article: a", "sha": "s1"}


async def test_enable_pages_workflow_returns_pages_url():
    captured = {}

    def handler(request):
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={})

    url = await make_client(handler).enable_pages_workflow("tok", "octocat/blog")
    assert captured["path"] == "/repos/octocat/blog/pages"
    assert captured["body"] == {"build_type": "workflow"}
    assert url == "https://octocat.github.io/blog"


async def test_404_is_not_found_kind():
    def handler(request):
        return httpx.Response(404, json={"message": "Not Found"})

    with pytest.raises(HostingAPIError) as exc:
        await make_client(handler).get_file("tok", "o/r", "content/missing.md")
    assert exc.value.status == 404
    assert exc.value.kind == "not_found"
    assert exc.value.is_not_found
    assert "Not Found" in exc.value.message


async def test_network_failure_is_hosting_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(HostingAPIError) as exc:
        await make_client(handler).get_repository("tok", "o/r")
    assert exc.value.status is None
    assert exc.value.kind == "network"


@pytest.mark.parametrize(
    "status,body,headers,kind",
    [
        (409, "", {}, "conflict"),
        (422, "", {}, "unprocessable"),
        (401, "", {}, "unauthorized"),
        (403, "API rate limit exceeded", {}, "rate_limited"),
        (403, "", {"x-ratelimit-remaining": "0"}, "rate_limited"),
        (403, "Resource not accessible", {"x-ratelimit-remaining": "12"}, "forbidden"),
        (429, "", {}, "rate_limited"),
        (502, "", {}, "server_error"),
        (418, "", {}, "other"),
    ],
)
def test_classify_status(status, body, headers, kind):
    assert classify_status(status, body, httpx.Headers(headers)) == kind


async def test_fetch_user_emails_failure_is_swallowed():
    def handler(request):
        return httpx.Response(403, json={"message": "scope missing"})

    client = make_client(handler)
    assert await client.fetch_user_emails("tok") is None
    assert await client.fetch_primary_email("tok") is None


async def test_fetch_primary_email_picks_primary():
    def handler(request):
        return httpx.Response(
            200,
            json=[
                {"email": "other@example.com", "primary": False, "verified": True},
                {"email": "main@example.com", "primary": True, "verified": True},
            ],
        )

    assert await make_client(handler).fetch_primary_email("tok") == "main@example.com"


async def test_validate_token():
    def ok(request):
        return httpx.Response(200, json={"id": 1, "login": "octocat"})

    def unauthorized(request):
        return httpx.Response(401, json={"message": "Bad credentials"})

    def broken(request):
        return httpx.Response(500, text="oops")

    assert (await make_client(ok).validate_token("tok")).is_valid

    bad = await make_client(unauthorized).validate_token("tok")
    assert not bad.is_valid
    assert bad.reason == "GitHub token is invalid or expired"

    failed = await make_client(broken).validate_token("tok")
    assert not failed.is_valid
    assert failed.reason == "GitHub token validation failed"


async def test_exchange_code():
    captured = {}

    def handler(request):
        captured["url"] = str(request.url)
        captured["form"] = request.content.decode()
        return httpx.Response(200, json={"access_token": "gho_new", "token_type": "bearer"})

    token = await make_client(handler).exchange_code("the-code")
    assert token == "gho_new"
    assert captured["url"] == "https://github.com/login/oauth/access_token"
    assert "code=the-code" in captured["form"]


async def test_exchange_code_error_payload():
    def handler(request):
        return httpx.Response(200, json={"error": "bad_verification_code", "error_description": "expired"})

    with pytest.raises(HostingAPIError) as exc:
        await make_client(handler).exchange_code("old")
    assert exc.value.message == "expired"


def test_oauth_url_carries_state_and_scopes():
    url = httpx.URL(make_client(lambda r: httpx.Response(200)).oauth_url("st4te"))
    assert url.host == "github.com"
    assert url.params["state"] == "st4te"
    assert url.params["client_id"] == "cid"
    assert url.params["scope"] == "repo,read:user,user:email"
