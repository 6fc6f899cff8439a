import base64

import httpx
import pytest

from app.integrations.storage.base import Absent, Present, RemoteRejected
from app.integrations.storage.factory import get_content_store
from app.integrations.storage.github import GitHubContentStore
from app.integrations.storage.local import LocalContentStore, blob_sha
from app.main import create_app
from app.services.path_resolver import PathResolver
from app.services.upload_service import UploadRequest, UploadService


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.fixture
def local_store(settings):
    settings.storage_provider = "local"
    return LocalContentStore(settings)


def test_blob_sha_matches_git():
    # `printf 'hello\n' | git hash-object --stdin`
    assert blob_sha(b"hello\n") == "ce013625030ba8dba906f756967f9e9ca394464a"


@pytest.mark.asyncio
async def test_create_then_update_requires_current_sha(local_store):
    await local_store.verify_access()
    assert await local_store.get_content("images") == Absent()

    await local_store.create_or_update_content("images/a.png", b64(b"one"), "create", "main")
    assert await local_store.get_content("images") == Present()
    state = await local_store.get_content("images/a.png")
    assert state == Present(sha=blob_sha(b"one"))

    with pytest.raises(RemoteRejected) as missing_sha:
        await local_store.create_or_update_content("images/a.png", b64(b"two"), "update", "main")
    assert missing_sha.value.status_code == 422

    with pytest.raises(RemoteRejected) as stale_sha:
        await local_store.create_or_update_content("images/a.png", b64(b"two"), "update", "main", sha="0" * 40)
    assert stale_sha.value.status_code == 409

    await local_store.create_or_update_content("images/a.png", b64(b"two"), "update", "main", sha=state.sha)
    assert (local_store.base_dir / "images" / "a.png").read_bytes() == b"two"


@pytest.mark.asyncio
async def test_path_outside_base_dir_is_rejected(local_store):
    with pytest.raises(RemoteRejected):
        await local_store.create_or_update_content("../escape.png", b64(b"x"), "msg", "main")


@pytest.mark.asyncio
async def test_upload_pipeline_against_local_store(settings, local_store):
    service = UploadService(settings, local_store, resolver=PathResolver("images", clock=lambda: 7))

    url = await service.upload(UploadRequest(content=b"bytes", file_name="my pic.png"))

    assert url == "http://localhost:3000/public/images/7-my_pic.png"
    assert (local_store.base_dir / "images" / "README.md").is_file()
    assert (local_store.base_dir / "images" / "7-my_pic.png").read_bytes() == b"bytes"


def test_factory_picks_provider(settings):
    assert isinstance(get_content_store(settings), GitHubContentStore)
    settings.storage_provider = "local"
    assert isinstance(get_content_store(settings), LocalContentStore)


@pytest.mark.asyncio
async def test_local_objects_are_served_from_public_route(settings, local_store):
    app = create_app(settings, store=local_store, resolver=PathResolver("images", clock=lambda: 9))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://localhost:3000") as client:
        uploaded = await client.post("/upload", files={"image": ("a.png", b"pixels", "image/png")})
        assert uploaded.json() == {"url": "http://localhost:3000/public/images/9-a.png"}

        served = await client.get("/public/images/9-a.png")
        assert served.status_code == 200
        assert served.content == b"pixels"

        assert (await client.get("/public/images/missing.png")).status_code == 404
