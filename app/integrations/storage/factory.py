from app.core.config import Settings
from app.integrations.storage.base import ContentStore
from app.integrations.storage.github import GitHubContentStore
from app.integrations.storage.local import LocalContentStore


def get_content_store(settings: Settings) -> ContentStore:
    if settings.storage_provider == "local":
        return LocalContentStore(settings)
    return GitHubContentStore(settings)
