# src/lambdas/lambda_deployer/artifacts.py
import json
import logging
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from src.models.pipeline_job import ArtifactLocation
from .errors import ArtifactFetchError, ArtifactPublishError

logger = logging.getLogger(__name__)


def serialize_result(result: Dict[str, Any]) -> bytes:
    """JSON body for the output artifact; drops boto3's ResponseMetadata."""
    body = {k: v for k, v in (result or {}).items() if k != "ResponseMetadata"}
    return json.dumps(body, default=str).encode("utf-8")


class ArtifactStore:
    """Reads and writes pipeline artifacts with an already-scoped S3 client."""

    def __init__(self, s3_client, sse: str = "aws:kms"):
        self.s3 = s3_client
        self.sse = sse

    def fetch(self, location: ArtifactLocation) -> bytes:
        """Returns the raw bytes of the artifact at `location`."""
        try:
            logger.info("Fetching artifact %s from %s", location.name, location.uri)
            response = self.s3.get_object(Bucket=location.bucket, Key=location.key)
            data = response["Body"].read()
            logger.info("Fetched %d bytes from %s", len(data), location.uri)
            return data
        except (ClientError, BotoCoreError) as e:
            logger.error("get_object failed for %s: %s", location.uri, e)
            raise ArtifactFetchError(f"Failed to fetch {location.uri}: {e}") from e

    def publish(self, location: ArtifactLocation, result: Dict[str, Any]):
        """Writes the serialized result to `location` with server-side encryption."""
        extra = {}
        if self.sse:
            extra["ServerSideEncryption"] = self.sse
        try:
            logger.info("Uploading result to %s", location.uri)
            response = self.s3.put_object(
                Bucket=location.bucket,
                Key=location.key,
                Body=serialize_result(result),
                ContentType="application/json",
                **extra,
            )
            status_code = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
            if status_code != 200:
                logger.warning("Upload returned status code %s", status_code)
            return response
        except (ClientError, BotoCoreError) as e:
            logger.error("put_object failed for %s: %s", location.uri, e)
            raise ArtifactPublishError(f"Failed to publish {location.uri}: {e}") from e
