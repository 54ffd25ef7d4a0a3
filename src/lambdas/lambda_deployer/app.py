# src/lambdas/lambda_deployer/app.py
import json
import logging
from typing import Any, Dict, Optional

from src.models.pipeline_job import Job, JobOutcome
from .artifacts import ArtifactStore, serialize_result
from .aws_clients import AwsClients
from .config import DeployDefaults, action as configured_action, load_defaults
from .deploy import deploy_function, deploy_region
from .errors import InvalidJobEvent, failure_message
from .params import job_id_from_event, parse_job, parse_user_parameters, redact_event
from .promote import promote_alias
from .reporter import JobReporter

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def _execution_id(context) -> Optional[str]:
    return getattr(context, "aws_request_id", None)


def run_deploy(job: Job, options: Dict[str, Any], clients: AwsClients, defaults: DeployDefaults) -> Dict[str, Any]:
    store = ArtifactStore(clients.s3(job.credentials), sse=defaults.artifact_sse)
    artifact = store.fetch(job.input_artifact)
    result = deploy_function(clients.lambda_(deploy_region(options, defaults)), artifact, options, defaults)
    if job.output_artifact:
        store.publish(job.output_artifact, result)
    else:
        logger.info("Job %s declares no output artifact, skipping publish", job.id)
    return result


def run_promote(job: Job, options: Dict[str, Any], clients: AwsClients, defaults: DeployDefaults) -> Dict[str, Any]:
    # region comes from the artifact's ARN, not from options or defaults
    store = ArtifactStore(clients.s3(job.credentials), sse=defaults.artifact_sse)
    artifact = store.fetch(job.input_artifact)
    return promote_alias(clients.lambda_, artifact, options)


ACTIONS = {"deploy": run_deploy, "promote": run_promote}


def run_action(
    action: str,
    event: Dict[str, Any],
    context,
    clients: Optional[AwsClients] = None,
    defaults: Optional[DeployDefaults] = None,
) -> Dict[str, Any]:
    """
    Runs one CodePipeline job end to end and reports exactly one result.
    Returns the outcome; raises only when the outcome itself can't be reported.
    """
    logger.info("Received event: %s", json.dumps(redact_event(event)))
    if action not in ACTIONS:
        raise ValueError(f"action must be one of: {', '.join(sorted(ACTIONS))}")

    job_id = job_id_from_event(event)
    if not job_id:
        # nothing to report against
        raise InvalidJobEvent("event has no CodePipeline.job id")

    clients = clients or AwsClients()
    reporter = JobReporter(clients.codepipeline())
    try:
        job = parse_job(event)
        options = parse_user_parameters(job.user_parameters)
        result = ACTIONS[action](job, options, clients, defaults or load_defaults())
        reporter.success(job.id)
    except Exception as e:
        logger.exception("%s failed for job %s", action, job_id)
        outcome = JobOutcome.failure(job_id, failure_message(e), _execution_id(context))
        reporter.failure(outcome.job_id, outcome.message, outcome.execution_id)
        return outcome.to_response()

    outcome = JobOutcome.success(job.id, json.loads(serialize_result(result)))
    return outcome.to_response()


def deploy_handler(event, context):
    return run_action("deploy", event, context)


def promote_handler(event, context):
    return run_action("promote", event, context)


def lambda_handler(event, context):
    """Single entrypoint; DEPLOYER_ACTION picks deploy (default) or promote."""
    return run_action(configured_action(), event, context)
