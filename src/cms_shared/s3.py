"""S3 helpers for cover images: pre-signed upload URLs and key layout."""

import boto3

from cms_shared.config import AWS_REGION, S3_BUCKET

ENTITY_PREFIXES = {
    "route": "routes",
    "activity": "activities",
}


def _s3():
    return boto3.client("s3", region_name=AWS_REGION)


def generate_presigned_upload_url(
    s3_key: str,
    content_type: str,
    expiry_seconds: int = 300,
) -> str:
    """Generate a pre-signed PUT URL for direct browser-to-S3 upload."""
    return _s3().generate_presigned_url(
        "put_object",
        Params={
            "Bucket": S3_BUCKET,
            "Key": s3_key,
            "ContentType": content_type,
        },
        ExpiresIn=expiry_seconds,
    )


def build_s3_key(entity_type: str, entity_slug: str, filename: str) -> str:
    """
    Canonical S3 key for an uploaded cover image.

    Patterns:
      route:    images/routes/<slug>/<filename>
      activity: images/activities/<slug>/<filename>
    """
    prefix = ENTITY_PREFIXES.get(entity_type)
    if prefix is None:
        raise ValueError(
            f"Unknown entity_type: {entity_type!r}. Must be 'route' or 'activity'."
        )
    return f"images/{prefix}/{entity_slug}/{filename}"
