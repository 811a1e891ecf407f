# FILE: inland/services/provisioning_service.py
"""
Template repository provisioning.

create from template -> fill placeholders -> enable pages. Steps run in order
and are never rolled back: a repository created in step 1 stays on the
hosting side even if a later step fails.
"""
import logging
import os
from typing import List, Optional

from inland.core.context import AppContext
from inland.core.errors import (
    HostingAPIError,
    InlandError,
    PagesDeploymentError,
    RepositoryCreationError,
)
from inland.services.github_client import decode_content
from inland.services.providers import (
    CreateRepoData,
    GitRepo,
    ProvisionedRepo,
    TemplateData,
    TreeEntry,
)

logger = logging.getLogger("inland.provisioning")

TEXT_EXTENSIONS = {".html", ".css", ".js", ".json", ".md", ".yml", ".yaml", ".txt"}
EMPTY_REPO_MARKER = "Git Repository is empty"


def should_process_file(path: str) -> bool:
    return os.path.splitext(path.lower())[1] in TEXT_EXTENSIONS


def is_repo_not_ready(error: HostingAPIError) -> bool:
    return error.status in (409, 422) or EMPTY_REPO_MARKER in (error.message or "")


async def list_tree_when_ready(ctx: AppContext, token: str, full_name: str, ref: str) -> List[TreeEntry]:
    """
    List a freshly generated repository's tree, waiting until it exists.

    Only "not ready yet" answers are retried, with exponential backoff. Auth,
    rate-limit and every other failure is raised on the first attempt.
    """
    settings = ctx.settings
    delay = settings.repo_ready_backoff
    attempt = 1
    while True:
        try:
            return await ctx.hosting.list_tree(token, full_name, ref)
        except HostingAPIError as e:
            if not is_repo_not_ready(e) or attempt >= settings.repo_ready_max_attempts:
                raise
            logger.info(
                f"Repository {full_name} not ready (status {e.status}), "
                f"retry {attempt}/{settings.repo_ready_max_attempts - 1} in {delay:.1f}s"
            )
        await ctx.sleep(delay)
        delay *= 2
        attempt += 1


async def replace_template_placeholders(
    ctx: AppContext, token: str, repo: GitRepo, template_data: TemplateData
) -> int:
    logger.info(
        f"Starting template placeholder replacement for {repo.full_name} on branch {repo.default_branch}"
    )
    await ctx.sleep(ctx.settings.repo_ready_initial_delay)

    entries = await list_tree_when_ready(ctx, token, repo.full_name, repo.default_branch)
    placeholders = template_data.placeholders()

    updated = 0
    # One file at a time to stay under the provider's rate limit
    for entry in entries:
        if entry.type != "blob" or not should_process_file(entry.path):
            continue
        current = await ctx.hosting.get_file(token, repo.full_name, entry.path)
        try:
            content = decode_content(current.content)
        except ValueError:
            logger.warning(f"Skipping {entry.path}: not UTF-8 text")
            continue

        new_content = content
        for placeholder, value in placeholders.items():
            if placeholder in new_content:
                new_content = new_content.replace(placeholder, value)

        if new_content != content:
            await ctx.hosting.put_file(
                token,
                repo.full_name,
                entry.path,
                new_content,
                f"Replace template placeholders in {entry.path}",
                current.sha,
            )
            updated += 1

    logger.info(f"Replaced placeholders in {updated} file(s) of {repo.full_name}")
    return updated


async def provision(
    ctx: AppContext,
    token: str,
    data: CreateRepoData,
    template_data: Optional[TemplateData] = None,
) -> ProvisionedRepo:
    # Step 1: create the repository from the template
    try:
        repo = await ctx.hosting.create_from_template(
            token, data.template_owner, data.template_repo, data.name, data.description
        )
    except InlandError as e:
        logger.error(f"Failed to create repository {data.name}: {e.message}")
        raise RepositoryCreationError(data.name, e.message) from e

    # Step 2: fill template placeholders; the repository already exists
    updated = 0
    if template_data:
        try:
            updated = await replace_template_placeholders(ctx, token, repo, template_data)
        except InlandError as e:
            logger.error(f"Placeholder replacement failed for {repo.full_name}: {e.message}")
            raise RepositoryCreationError(repo.full_name, e.message) from e

    # Step 3: enable pages
    try:
        pages_url = await ctx.hosting.enable_pages_workflow(token, repo.full_name)
    except InlandError as e:
        logger.error(f"Failed to enable GitHub Pages for {repo.full_name}: {e.message}")
        raise PagesDeploymentError(repo.full_name, e.message, repo.html_url) from e

    logger.info(f"Provisioned {repo.full_name}, pages at {pages_url}")
    return ProvisionedRepo(repo=repo, pages_url=pages_url, files_updated=updated)
