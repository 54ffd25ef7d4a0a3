# src/lambdas/lambda_deployer/deploy.py
import logging
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from .config import DeployDefaults
from .errors import ResourceMutationError, error_code

logger = logging.getLogger(__name__)

CONFLICT = "ResourceConflictException"


def default_function_spec(artifact: bytes, defaults: DeployDefaults) -> Dict[str, Any]:
    return {
        "Code": {"ZipFile": artifact},
        "Description": None,
        "FunctionName": None,
        "Handler": defaults.handler,
        "MemorySize": defaults.memory_size,
        "Publish": True,
        "Role": defaults.role,
        "Runtime": defaults.runtime,
        "Timeout": defaults.timeout,
        "VpcConfig": None,
    }


def build_function_spec(artifact: bytes, options: Dict[str, Any], defaults: DeployDefaults) -> Dict[str, Any]:
    """
    CreateFunction request: truthy options overlaid on the defaults, then every
    falsy field dropped. Lambda treats an explicit empty value differently from
    an absent one, so only set fields are sent.
    """
    spec = default_function_spec(artifact, defaults)
    spec.update({k: v for k, v in options.items() if k in spec and v})
    return {k: v for k, v in spec.items() if v}


def deploy_region(options: Dict[str, Any], defaults: DeployDefaults) -> str:
    return options.get("Region") or defaults.region


def update_function_code(lambda_client, function_name: str, artifact: bytes) -> Dict[str, Any]:
    try:
        # TODO: reconcile configuration (handler, memory, role...) when it differs from the spec
        return lambda_client.update_function_code(
            FunctionName=function_name, ZipFile=artifact, Publish=True
        )
    except (ClientError, BotoCoreError) as e:
        logger.error("update_function_code failed for %s: %s", function_name, e)
        raise ResourceMutationError(f"Failed to update code of {function_name}: {e}") from e


def deploy_function(lambda_client, artifact: bytes, options: Dict[str, Any], defaults: DeployDefaults) -> Dict[str, Any]:
    """
    Create the function, or update its code if it already exists. The conflict
    from CreateFunction is the only existence check.
    """
    spec = build_function_spec(artifact, options, defaults)
    function_name = spec.get("FunctionName")
    if not function_name:
        raise ResourceMutationError("FunctionName is required (set it in UserParameters)")

    logger.info("Creating function %s: %s", function_name,
                {k: v for k, v in spec.items() if k != "Code"})
    try:
        return lambda_client.create_function(**spec)
    except ClientError as e:
        if error_code(e) != CONFLICT:
            logger.error("create_function failed for %s: %s", function_name, e)
            raise ResourceMutationError(f"Failed to create {function_name}: {e}") from e
    except BotoCoreError as e:
        logger.error("create_function failed for %s: %s", function_name, e)
        raise ResourceMutationError(f"Failed to create {function_name}: {e}") from e

    logger.info("%s already exists, updating function code", function_name)
    return update_function_code(lambda_client, function_name, artifact)
