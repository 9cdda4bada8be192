"""Downloads API controller — serves saved extraction artifacts."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from js_extractor.infrastructure.dependencies import get_download_storage
from js_extractor.infrastructure.storage.download_storage import DownloadStorage

router = APIRouter(prefix="/downloads", tags=["Downloads"])


@router.get("/{domain}/{filename}")
async def download_artifact(
    domain: str,
    filename: str,
    storage: DownloadStorage = Depends(get_download_storage),
):
    """Stream a saved page, script, combined file or manifest."""
    file_path = storage.resolve(domain, filename)
    if file_path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return FileResponse(path=str(file_path), filename=file_path.name)
