# src/lambdas/lambda_deployer/reporter.py
import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from .errors import JobReportError

logger = logging.getLogger(__name__)

# CodePipeline rejects failureDetails.message longer than this
MAX_MESSAGE_LENGTH = 5000


class JobReporter:
    """Sends the job's single terminal result to CodePipeline."""

    def __init__(self, codepipeline_client):
        self.codepipeline = codepipeline_client

    def success(self, job_id: str):
        logger.info("putJobSuccessResult for job %s", job_id)
        try:
            return self.codepipeline.put_job_success_result(jobId=job_id)
        except (ClientError, BotoCoreError) as e:
            logger.error("putJobSuccessResult failed for job %s: %s", job_id, e)
            raise JobReportError(f"Failed to report success for job {job_id}: {e}") from e

    def failure(self, job_id: str, message: str, execution_id: Optional[str]):
        message = message[:MAX_MESSAGE_LENGTH]
        logger.info("putJobFailureResult for job %s: %s", job_id, message)
        details = {"type": "JobFailed", "message": message}
        if execution_id:
            details["externalExecutionId"] = execution_id
        try:
            return self.codepipeline.put_job_failure_result(jobId=job_id, failureDetails=details)
        except (ClientError, BotoCoreError) as e:
            logger.error("putJobFailureResult failed for job %s: %s", job_id, e)
            raise JobReportError(f"Failed to report failure for job {job_id}: {e}") from e
