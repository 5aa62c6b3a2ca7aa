# deployer/types/errors.py

from typing import Optional, Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .results import DeploymentResult


class DeployerError(Exception):
    """Base error. Carries the stage it was raised in and the target context."""

    stage = "deploy"
    error_type = "deployer_error"
    exit_code = 1

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        parts = " ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({parts})"


class ConfigValidationError(DeployerError):
    stage = "config"
    error_type = "validation_failed"
    exit_code = 2


class SerializationError(DeployerError):
    stage = "serialize"
    error_type = "serialization_failed"
    exit_code = 2


class EnvironmentLookupFailed(DeployerError):
    stage = "lookup"
    error_type = "lookup_failed"
    exit_code = 3


class DeploymentFailed(DeployerError):
    stage = "deploy"
    error_type = "deployment_failed"

    def __init__(self, message: str, result: 'DeploymentResult',
                 context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context.setdefault("target", result.target)
        context.setdefault("returncode", result.returncode)
        super().__init__(message, context)
        self.result = result

    @property
    def returncode(self) -> int:
        return self.result.returncode

    @property
    def exit_code(self) -> int:
        return self.result.returncode or 1

    @property
    def output(self) -> str:
        return self.result.stderr or self.result.stdout


'''
Helper functions to create specific error types
'''
def create_validation_error(
    message: str,
    field: Optional[str] = None,
    target: Optional[str] = None,
    config_path: Optional[str] = None
) -> ConfigValidationError:
    context = {}
    if target:
        context["target"] = target
    if field:
        context["field"] = field
    if config_path:
        context["config_path"] = config_path

    return ConfigValidationError(message, context)


def create_lookup_error(
    message: str,
    canister: str,
    network: Optional[str] = None,
    output: Optional[str] = None
) -> EnvironmentLookupFailed:
    context = {"canister": canister}
    if network:
        context["network"] = network
    if output:
        context["output"] = output

    return EnvironmentLookupFailed(message, context)
