"""Pre-signed S3 upload URLs for cover images: POST /dashboard/upload-url.

Flow:
  1. The editor calls POST /dashboard/upload-url with filename, content_type, entity info.
  2. The panel returns a pre-signed PUT URL + the S3 key.
  3. The browser uploads the file directly to S3.
  4. The editor stores the key as the route/activity `cover_image`.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from cms_admin.deps import require_session
from cms_shared.models import UploadUrlResponse
from cms_shared.s3 import ENTITY_PREFIXES, build_s3_key, generate_presigned_upload_url
from cms_shared.schemas import UploadUrlRequest
from cms_shared.session import SessionContext

router = APIRouter()

_ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
}


@router.post("/dashboard/upload-url", response_model=UploadUrlResponse)
def get_upload_url(req: UploadUrlRequest, _: SessionContext = Depends(require_session)):
    if req.entity_type not in ENTITY_PREFIXES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"entity_type must be one of {sorted(ENTITY_PREFIXES)}",
        )

    if req.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"content_type must be one of {sorted(_ALLOWED_CONTENT_TYPES)}",
        )

    s3_key = build_s3_key(
        entity_type=req.entity_type,
        entity_slug=req.entity_slug,
        filename=req.filename,
    )

    url = generate_presigned_upload_url(s3_key=s3_key, content_type=req.content_type)

    return UploadUrlResponse(url=url, s3Key=s3_key, key=req.filename)
