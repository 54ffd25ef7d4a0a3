# Shared pytest fixtures. Living at the repo root also puts the root on
# sys.path so tests can `from src... import`.
import io
import json
from typing import Any, Dict, List, Optional

import pytest
from botocore.exceptions import ClientError

from src.lambdas.lambda_deployer.aws_clients import AwsClients
from src.lambdas.lambda_deployer.config import DeployDefaults


def client_error(code: str, operation: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


# -------- fakes --------

class FakeS3:
    def __init__(self, objects: Optional[Dict[tuple, bytes]] = None, put_error: Optional[str] = None):
        self.objects = dict(objects or {})
        self.put_error = put_error
        self.puts: List[Dict[str, Any]] = []

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise client_error("NoSuchKey", "GetObject", "The specified key does not exist.")
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def put_object(self, **kwargs):
        if self.put_error:
            raise client_error(self.put_error, "PutObject")
        self.puts.append(kwargs)
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = kwargs["Body"]
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}


class FakeLambda:
    """Records calls; `errors` maps operation name -> error code to raise."""

    def __init__(self, errors: Optional[Dict[str, str]] = None):
        self.errors = dict(errors or {})
        self.calls: List[tuple] = []

    def _call(self, op: str, kwargs: Dict[str, Any], response: Dict[str, Any]):
        self.calls.append((op, kwargs))
        if op in self.errors:
            raise client_error(self.errors[op], op)
        return dict(response, ResponseMetadata={"HTTPStatusCode": 200})

    def create_function(self, **kwargs):
        name = kwargs["FunctionName"]
        return self._call("create_function", kwargs, {
            "FunctionName": name,
            "FunctionArn": f"arn:aws:lambda:us-east-1:123456789012:function:{name}:1",
            "Version": "1",
        })

    def update_function_code(self, **kwargs):
        name = kwargs["FunctionName"]
        return self._call("update_function_code", kwargs, {
            "FunctionName": name,
            "FunctionArn": f"arn:aws:lambda:us-east-1:123456789012:function:{name}:2",
            "Version": "2",
        })

    def update_alias(self, **kwargs):
        return self._call("update_alias", kwargs, {"Name": kwargs["Name"], "FunctionVersion": kwargs["FunctionVersion"]})

    def create_alias(self, **kwargs):
        return self._call("create_alias", kwargs, {"Name": kwargs["Name"], "FunctionVersion": kwargs["FunctionVersion"]})

    def ops(self) -> List[str]:
        return [op for op, _ in self.calls]


class FakeCodePipeline:
    def __init__(self, fail_success: bool = False, fail_failure: bool = False):
        self.fail_success, self.fail_failure = fail_success, fail_failure
        self.successes: List[Dict[str, Any]] = []
        self.failures: List[Dict[str, Any]] = []

    def put_job_success_result(self, **kwargs):
        if self.fail_success:
            raise client_error("JobNotFoundException", "PutJobSuccessResult")
        self.successes.append(kwargs)
        return {}

    def put_job_failure_result(self, **kwargs):
        if self.fail_failure:
            raise client_error("InvalidJobStateException", "PutJobFailureResult")
        self.failures.append(kwargs)
        return {}


class FakeClients(AwsClients):
    def __init__(self, s3=None, lambda_client=None, codepipeline=None):
        super().__init__()
        self._s3 = s3 or FakeS3()
        self._lambda = lambda_client or FakeLambda()
        self._codepipeline = codepipeline or FakeCodePipeline()
        self.s3_credentials = []
        self.lambda_regions = []

    def s3(self, credentials):
        self.s3_credentials.append(credentials)
        return self._s3

    def lambda_(self, region_name):
        self.lambda_regions.append(region_name)
        return self._lambda

    def codepipeline(self):
        return self._codepipeline


class FakeContext:
    aws_request_id = "req-1234"


# -------- fixtures --------

INPUT_BUCKET = "codepipeline-us-east-1-artifacts"
INPUT_KEY = "my-pipeline/BuildOutpu/abc123.zip"
OUTPUT_KEY = "my-pipeline/DeployOutp/def456"


@pytest.fixture
def defaults():
    return DeployDefaults(
        handler="index.handler",
        runtime="python3.12",
        memory_size=256,
        timeout=30,
        role="arn:aws:iam::123456789012:role/lambda-exec",
        region="us-east-1",
        artifact_sse="aws:kms",
    )


@pytest.fixture
def make_event():
    def _make(user_parameters: Any = None, job_id: str = "job-1", outputs: bool = True,
              inputs: int = 1) -> Dict[str, Any]:
        if user_parameters is not None and not isinstance(user_parameters, str):
            user_parameters = json.dumps(user_parameters)
        input_artifacts = [
            {
                "name": f"BuildOutput{i}" if i else "BuildOutput",
                "location": {"type": "S3", "s3Location": {
                    "bucketName": INPUT_BUCKET,
                    "objectKey": INPUT_KEY if i == 0 else f"{INPUT_KEY}.{i}",
                }},
            }
            for i in range(inputs)
        ]
        output_artifacts = [{
            "name": "DeployOutput",
            "location": {"type": "S3", "s3Location": {"bucketName": INPUT_BUCKET, "objectKey": OUTPUT_KEY}},
        }] if outputs else []
        configuration = {"FunctionName": "lambda-deployer"}
        if user_parameters is not None:
            configuration["UserParameters"] = user_parameters
        return {
            "CodePipeline.job": {
                "id": job_id,
                "accountId": "123456789012",
                "data": {
                    "actionConfiguration": {"configuration": configuration},
                    "inputArtifacts": input_artifacts,
                    "outputArtifacts": output_artifacts,
                    "artifactCredentials": {
                        "accessKeyId": "AKIAEXAMPLE",
                        "secretAccessKey": "secret",
                        "sessionToken": "token",
                    },
                },
            }
        }
    return _make


@pytest.fixture
def context():
    return FakeContext()


@pytest.fixture
def fake_s3():
    return FakeS3({(INPUT_BUCKET, INPUT_KEY): b"PK\x03\x04zip-bytes"})


@pytest.fixture
def fake_lambda():
    return FakeLambda()


@pytest.fixture
def fake_codepipeline():
    return FakeCodePipeline()


@pytest.fixture
def clients(fake_s3, fake_lambda, fake_codepipeline):
    return FakeClients(fake_s3, fake_lambda, fake_codepipeline)
