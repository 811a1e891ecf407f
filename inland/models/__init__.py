from inland.models.user import User
from inland.models.git_integration import GitIntegration
from inland.models.site import Site
from inland.models.article import Article
from inland.models.media import Media

__all__ = ["User", "GitIntegration", "Site", "Article", "Media"]
