"""S3 implementation of the ImageStore port."""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from userhub_config.settings import Settings

logger = logging.getLogger(__name__)


class ImageStoreError(Exception):
    """Raised when an image cannot be removed from the bucket."""


class S3ImageStore:
    """Deletes profile images from an S3 bucket.

    Parameters
    ----------
    bucket_name
        Bucket holding the uploaded images
    client
        A boto3 S3 client. Built with ``boto3.client("s3")`` when omitted.
    """

    def __init__(self, bucket_name: str, client: Optional[Any] = None):
        self._bucket_name = bucket_name
        self._client = client if client is not None else boto3.client("s3")

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ImageStore":
        client_kwargs: dict[str, Any] = {"region_name": settings.aws_region}
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
            client_kwargs["aws_secret_access_key"] = (
                settings.aws_secret_access_key.get_secret_value()
            )
        return cls(settings.aws_s3_bucket_name, boto3.client("s3", **client_kwargs))

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to delete %s from bucket %s: %s", key, self._bucket_name, e)
            msg = f"Failed to delete image {key}"
            raise ImageStoreError(msg) from e
        logger.info("Deleted image %s from bucket %s", key, self._bucket_name)
