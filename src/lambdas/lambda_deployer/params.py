# src/lambdas/lambda_deployer/params.py
import json
import logging
from typing import Any, Dict, List, Tuple

from src.models.pipeline_job import ArtifactLocation, AwsCredentials, Job
from .errors import InvalidJobEvent, OptionParseError

logger = logging.getLogger(__name__)

# UserParameters keys we act on; anything else is ignored
RECOGNIZED_OPTIONS = (
    "FunctionName",
    "Description",
    "Handler",
    "MemorySize",
    "Publish",
    "Role",
    "Runtime",
    "Timeout",
    "VpcConfig",
    "Region",
    "Alias",
)


def _decode_options(text: Any) -> Dict[str, Any]:
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        raise OptionParseError(f"UserParameters is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise OptionParseError(f"UserParameters must be a JSON object, got {type(parsed).__name__}")
    return parsed


def parse_user_parameters(text: Any) -> Dict[str, Any]:
    """
    Best-effort parse of the action's UserParameters string.
    Returns only recognized keys; malformed input gives {} so defaults apply.
    """
    if text is None or text == "":
        return {}
    try:
        parsed = _decode_options(text)
    except OptionParseError as e:
        logger.warning("Failed to parse UserParameters, using defaults: %s", e)
        return {}
    ignored = sorted(k for k in parsed if k not in RECOGNIZED_OPTIONS)
    if ignored:
        logger.info("Ignoring unrecognized UserParameters keys: %s", ignored)
    return {k: v for k, v in parsed.items() if k in RECOGNIZED_OPTIONS}


def _artifacts(raw: List[Dict[str, Any]]) -> Tuple[ArtifactLocation, ...]:
    out = []
    for a in raw or []:
        s3 = (a.get("location") or {}).get("s3Location") or {}
        out.append(ArtifactLocation(
            name=a.get("name", ""),
            bucket=s3.get("bucketName", ""),
            key=s3.get("objectKey", ""),
        ))
    return tuple(out)


def _credentials(job_id: str, raw: Dict[str, Any]) -> AwsCredentials:
    # artifact reads never fall back to the function's own role
    raw = raw or {}
    if not raw.get("accessKeyId") or not raw.get("secretAccessKey"):
        raise InvalidJobEvent(f"job {job_id} has no artifactCredentials")
    return AwsCredentials(
        access_key_id=raw["accessKeyId"],
        secret_access_key=raw["secretAccessKey"],
        session_token=raw.get("sessionToken", ""),
    )


def job_id_from_event(event: Dict[str, Any]) -> str:
    return ((event or {}).get("CodePipeline.job") or {}).get("id", "")


def parse_job(event: Dict[str, Any]) -> Job:
    """Build the immutable Job from a CodePipeline invoke event."""
    raw = (event or {}).get("CodePipeline.job")
    if not raw or not raw.get("id"):
        raise InvalidJobEvent("event has no CodePipeline.job id")

    data = raw.get("data") or {}
    configuration = (data.get("actionConfiguration") or {}).get("configuration") or {}
    inputs = _artifacts(data.get("inputArtifacts"))
    if not inputs or not inputs[0].bucket or not inputs[0].key:
        raise InvalidJobEvent(f"job {raw['id']} has no input artifact location")
    if len(inputs) > 1:
        logger.info("Job %s has %d input artifacts; only %s is used", raw["id"], len(inputs), inputs[0].name)

    return Job(
        id=raw["id"],
        input_artifacts=inputs,
        output_artifacts=_artifacts(data.get("outputArtifacts")),
        user_parameters=configuration.get("UserParameters") or "",
        credentials=_credentials(raw["id"], data.get("artifactCredentials")),
    )


def redact_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the event safe to log (artifactCredentials removed)."""
    safe = json.loads(json.dumps(event or {}, default=str))
    data = (safe.get("CodePipeline.job") or {}).get("data") or {}
    if "artifactCredentials" in data:
        data["artifactCredentials"] = "***"
    return safe
