# src/lambdas/lambda_deployer/aws_clients.py
import logging
from typing import Callable

import boto3
from botocore.config import Config

from src.models.pipeline_job import AwsCredentials
from .config import env, region as _region

logger = logging.getLogger(__name__)

# single attempt per call; a failed step is final
NO_RETRY = Config(retries={"total_max_attempts": 1, "mode": "standard"})


class AwsClients:
    """
    Builds the boto3 clients each step needs. Handlers get one of these and
    pass clients down, so tests can swap in fakes.
    """

    def __init__(self, session_factory: Callable[..., boto3.Session] = boto3.Session) -> None:
        self._session_factory = session_factory

    def s3(self, credentials: AwsCredentials):
        # artifact access must use the job's credentials, not the function role
        if credentials is None:
            raise ValueError("S3 artifact access requires the job's artifactCredentials")
        session = self._session_factory(region_name=_region(), **credentials.as_session_kwargs())
        kwargs = {"config": NO_RETRY.merge(Config(signature_version="s3v4"))}
        ep = env("AWS_ENDPOINT_URL_S3")
        if ep:
            kwargs["endpoint_url"] = ep
        return session.client("s3", **kwargs)

    def lambda_(self, region_name: str):
        logger.info("Using Lambda client in %s", region_name)
        return self._session_factory(region_name=region_name).client("lambda", config=NO_RETRY)

    def codepipeline(self):
        return self._session_factory(region_name=_region()).client("codepipeline", config=NO_RETRY)
