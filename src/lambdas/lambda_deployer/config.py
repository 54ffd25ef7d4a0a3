# src/lambdas/lambda_deployer/config.py
import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


def env(name: str, default: str = "") -> str:
    return os.environ.get(name, default)


def region() -> str:
    return env("AWS_REGION") or env("AWS_DEFAULT_REGION") or "us-east-1"


def _env_int(name: str, default: int) -> int:
    raw = env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %s", name, raw, default)
        return default


# Static settings used when the pipeline doesn't override them
@dataclass(frozen=True)
class DeployDefaults:
    handler: str = "lambda_function.lambda_handler"
    runtime: str = "python3.12"
    memory_size: int = 128
    timeout: int = 3
    role: Optional[str] = None
    region: str = "us-east-1"
    artifact_sse: str = "aws:kms"


def load_defaults() -> DeployDefaults:
    """Read defaults from the environment at call time (tests monkeypatch env)."""
    return DeployDefaults(
        handler=env("FUNCTION_HANDLER", DeployDefaults.handler),
        runtime=env("FUNCTION_RUNTIME", DeployDefaults.runtime),
        memory_size=_env_int("FUNCTION_MEMORY_SIZE", DeployDefaults.memory_size),
        timeout=_env_int("FUNCTION_TIMEOUT", DeployDefaults.timeout),
        role=env("FUNCTION_ROLE") or None,
        region=region(),
        artifact_sse=env("ARTIFACT_SSE", DeployDefaults.artifact_sse),
    )


def action() -> str:
    return env("DEPLOYER_ACTION", "deploy").lower()
