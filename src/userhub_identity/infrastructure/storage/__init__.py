from userhub_identity.infrastructure.storage.s3_image_store import (
    ImageStoreError,
    S3ImageStore,
)

__all__ = ["ImageStoreError", "S3ImageStore"]
