import httpx
import pytest

from app.core.config import Settings
from app.integrations.storage.github import GitHubContentStore
from tests.fakes import OWNER, REPO, FakeGitHub


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        storage_provider="github",
        github_token="test-token",
        github_owner=OWNER,
        github_repo=REPO,
        github_branch="main",
        storage_local_dir=str(tmp_path / "storage"),
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def github_store(settings, fake_github) -> GitHubContentStore:
    client = httpx.AsyncClient(
        base_url="https://api.github.test",
        transport=httpx.MockTransport(fake_github.handler),
    )
    return GitHubContentStore(settings, client=client)
