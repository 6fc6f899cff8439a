from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from app.api.deps import get_store
from app.integrations.storage.base import ContentStore, RemoteRejected
from app.integrations.storage.local import LocalContentStore

router = APIRouter(tags=["storage"])


@router.get("/public/{object_key:path}")
async def local_public(object_key: str, store: ContentStore = Depends(get_store)):
    if not isinstance(store, LocalContentStore):
        raise HTTPException(status_code=404, detail="Not found")
    try:
        target = store.resolve(object_key)
    except RemoteRejected as exc:
        raise HTTPException(status_code=400, detail="Invalid path") from exc
    if not target.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(target)
