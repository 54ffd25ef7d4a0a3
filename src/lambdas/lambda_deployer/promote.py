# src/lambdas/lambda_deployer/promote.py
import json
import logging
import re
from typing import Any, Callable, Dict

from botocore.exceptions import BotoCoreError, ClientError

from src.models.pipeline_job import VersionDescriptor, to_json
from .errors import InvalidVersionDescriptor, MissingAliasParameter, ResourceMutationError, error_code

logger = logging.getLogger(__name__)

NOT_FOUND = "ResourceNotFoundException"

# arn:<partition>:lambda:<region>:<account>:function:<name>:<version|$LATEST>
FUNCTION_ARN = re.compile(
    r"^(arn:aws[a-z-]*:lambda:([a-z0-9-]+):\d{12}:function:[A-Za-z0-9_-]+):(\d+|\$LATEST)$"
)
VERSION = re.compile(r"^(\d+|\$LATEST)$")


def parse_version_descriptor(artifact: bytes) -> VersionDescriptor:
    """Reads a previous deploy's result ({"FunctionArn": ..., "Version": ...})."""
    try:
        doc = json.loads(artifact)
    except (TypeError, ValueError) as e:
        raise InvalidVersionDescriptor(f"artifact is not JSON: {e}") from e
    if not isinstance(doc, dict):
        raise InvalidVersionDescriptor("artifact must be a JSON object")

    arn = doc.get("FunctionArn")
    version = doc.get("Version")
    m = FUNCTION_ARN.match(arn) if isinstance(arn, str) else None
    if not m:
        raise InvalidVersionDescriptor(f"FunctionArn {arn!r} is not a qualified Lambda function ARN")
    if not isinstance(version, str) or not VERSION.match(version):
        raise InvalidVersionDescriptor(f"Version {version!r} is not a Lambda version")
    if version != m.group(3):
        raise InvalidVersionDescriptor(f"Version {version!r} does not match the version in {arn}")

    return VersionDescriptor(
        function_arn=arn,
        base_arn=m.group(1),
        region=m.group(2),
        qualifier=m.group(3),
        version=version,
    )


def promote_alias(
    lambda_factory: Callable[[str], Any],
    artifact: bytes,
    options: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Point options["Alias"] at the version described by the artifact, creating
    the alias if it doesn't exist yet. The Lambda client comes from
    lambda_factory(region) with the region taken from the ARN.
    """
    descriptor = parse_version_descriptor(artifact)
    alias = options.get("Alias")
    if not alias:
        raise MissingAliasParameter("promote requires an \"Alias\" in UserParameters")

    logger.info("Promoting %s to alias %s", to_json(descriptor), alias)
    client = lambda_factory(descriptor.region)
    alias_kwargs = {
        "FunctionName": descriptor.base_arn,
        "Name": alias,
        "FunctionVersion": descriptor.version,
    }
    try:
        return client.update_alias(**alias_kwargs)
    except ClientError as e:
        if error_code(e) != NOT_FOUND:
            logger.error("update_alias failed for %s:%s: %s", descriptor.base_arn, alias, e)
            raise ResourceMutationError(f"Failed to update alias {alias}: {e}") from e
    except BotoCoreError as e:
        logger.error("update_alias failed for %s:%s: %s", descriptor.base_arn, alias, e)
        raise ResourceMutationError(f"Failed to update alias {alias}: {e}") from e

    logger.info("Alias %s not found on %s, creating it", alias, descriptor.base_arn)
    try:
        return client.create_alias(**alias_kwargs)
    except (ClientError, BotoCoreError) as e:
        logger.error("create_alias failed for %s:%s: %s", descriptor.base_arn, alias, e)
        raise ResourceMutationError(f"Failed to create alias {alias}: {e}") from e
