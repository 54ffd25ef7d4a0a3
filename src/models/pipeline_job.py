# src/models/pipeline_job.py
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple
import json


# Temporary credentials CodePipeline hands the action for artifact access
@dataclass(frozen=True)
class AwsCredentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(default="", repr=False)

    def as_session_kwargs(self) -> Dict[str, str]:
        """Keyword arguments for boto3.Session()."""
        kwargs = {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
        }
        if self.session_token:
            kwargs["aws_session_token"] = self.session_token
        return kwargs


# One entry of inputArtifacts / outputArtifacts
@dataclass(frozen=True)
class ArtifactLocation:
    name: str       # artifact["name"]
    bucket: str     # location.s3Location.bucketName
    key: str        # location.s3Location.objectKey

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


# The CodePipeline job this invocation is working on
@dataclass(frozen=True)
class Job:
    """Built once from the triggering event; never mutated afterwards."""
    id: str
    input_artifacts: Tuple[ArtifactLocation, ...] = ()
    output_artifacts: Tuple[ArtifactLocation, ...] = ()
    user_parameters: str = ""
    credentials: Optional[AwsCredentials] = None

    @property
    def input_artifact(self) -> ArtifactLocation:
        # only the first input is honored
        return self.input_artifacts[0]

    @property
    def output_artifact(self) -> Optional[ArtifactLocation]:
        return self.output_artifacts[0] if self.output_artifacts else None


# Resolved target of a promotion, parsed from a previous deploy's result
@dataclass(frozen=True)
class VersionDescriptor:
    function_arn: str   # qualified, e.g. arn:aws:lambda:us-east-1:123456789012:function:my-fn:7
    base_arn: str       # function_arn without the version qualifier
    region: str
    qualifier: str      # version number or $LATEST from the ARN
    version: str        # the "Version" field of the descriptor


# Terminal result of one invocation
@dataclass(frozen=True)
class JobOutcome:
    job_id: str
    succeeded: bool
    data: Dict[str, Any] = field(default_factory=dict)
    message: str = ""
    execution_id: Optional[str] = None

    @classmethod
    def success(cls, job_id: str, data: Dict[str, Any]) -> "JobOutcome":
        return cls(job_id=job_id, succeeded=True, data=data)

    @classmethod
    def failure(cls, job_id: str, message: str, execution_id: Optional[str]) -> "JobOutcome":
        return cls(job_id=job_id, succeeded=False, message=message, execution_id=execution_id)

    def to_response(self) -> Dict[str, Any]:
        """Shape returned from the Lambda handler."""
        if self.succeeded:
            return {"status": "Succeeded", "jobId": self.job_id, "result": self.data}
        return {
            "status": "Failed",
            "jobId": self.job_id,
            "message": self.message,
            "externalExecutionId": self.execution_id,
        }


# ---- Helpers ----
# Convert a dataclass object into a JSON string
def to_json(obj: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(asdict(obj), ensure_ascii=False, indent=2, default=str)
    return json.dumps(asdict(obj), ensure_ascii=False, separators=(",", ":"), default=str)


__all__ = [
    "AwsCredentials",
    "ArtifactLocation",
    "Job",
    "VersionDescriptor",
    "JobOutcome",
    "to_json",
]
