# FILE: inland/core/errors.py
"""
Closed error taxonomy for the CMS core.

Every failure that leaves a service is one of these. The HTTP layer maps them
to responses with a single exception handler (see inland/server.py).
"""
from typing import Any, Dict, Optional


class InlandError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "kind": type(self).__name__}


class NotFoundError(InlandError):
    """The row does not exist."""
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class AccessDeniedError(InlandError):
    """The row exists but belongs to another user."""
    status_code = 403

    def __init__(self, entity: str, entity_id: str, user_id: str):
        super().__init__(f"You do not have access to this {entity.lower()}")
        self.entity = entity
        self.entity_id = entity_id
        self.user_id = user_id


class DuplicateNameError(InlandError):
    status_code = 409

    def __init__(self, field: str, value: str, message: Optional[str] = None):
        super().__init__(message or f"{field} '{value}' is already taken")
        self.field = field
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class DuplicateSiteNameError(DuplicateNameError):
    def __init__(self, name: str, user_id: str):
        super().__init__("name", name, "You already have a site with this name")
        self.user_id = user_id


class DuplicateSlugError(DuplicateNameError):
    def __init__(self, slug: str, site_id: str):
        super().__init__("slug", slug, "An article with this slug already exists in this site")
        self.site_id = site_id


class ValidationError(InlandError):
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class TokenError(InlandError):
    """No usable hosting token; the client should run the reconnect flow."""
    status_code = 401

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "reconnect": True}


class HostingAPIError(InlandError):
    status_code = 502

    def __init__(self, status: Optional[int], message: str, kind: str = "other"):
        super().__init__(message)
        self.status = status
        self.kind = kind

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "status": self.status, "reason": self.kind}


class RepositoryCreationError(InlandError):
    """Nothing usable was created (or placeholders could not be filled)."""
    status_code = 502

    def __init__(self, repo_name: str, reason: str):
        super().__init__(f"Failed to create repository {repo_name}: {reason}")
        self.repo_name = repo_name
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "repo": self.repo_name}


class PagesDeploymentError(InlandError):
    """The repository exists but pages could not be enabled."""
    status_code = 502

    def __init__(self, repo_name: str, reason: str, html_url: Optional[str] = None):
        super().__init__(
            f"Repository {repo_name} was created but GitHub Pages could not be enabled: {reason}"
        )
        self.repo_name = repo_name
        self.reason = reason
        self.html_url = html_url

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "repo": self.repo_name, "html_url": self.html_url}
