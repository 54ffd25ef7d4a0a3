# src/lambdas/lambda_deployer/errors.py
import json

from botocore.exceptions import ClientError


class DeployerError(RuntimeError):
    """Base class for failures reported back to the pipeline."""


# Never surfaced: the normalizer swallows it and falls back to {}
class OptionParseError(DeployerError):
    """UserParameters could not be read as a JSON object."""


class InvalidJobEvent(DeployerError):
    """The triggering event is not a usable CodePipeline job."""


class ArtifactFetchError(DeployerError):
    """Reading the input artifact from S3 failed."""


class InvalidVersionDescriptor(DeployerError):
    """The promote input artifact does not describe a Lambda version."""


class MissingAliasParameter(DeployerError):
    """Promotion requested without an "Alias" user parameter."""


class ResourceMutationError(DeployerError):
    """Lambda rejected a create/update/alias call."""


class ArtifactPublishError(DeployerError):
    """Writing the output artifact to S3 failed."""


class JobReportError(DeployerError):
    """CodePipeline did not accept the job result."""


def failure_message(error: BaseException) -> str:
    """Serialized error detail for put_job_failure_result."""
    return json.dumps({"error": type(error).__name__, "message": str(error)})


def error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")
