# deployer/pipeline/deployment_pipeline.py

from typing import List, Optional

from ..builders.argument_builder import ArgumentBuilder
from ..clients.dfx import DfxClient
from ..core.logging import LoggingMixin
from ..types.configs.deployment import DeploymentConfig
from ..types.errors import DeployerError, DeploymentFailed, create_validation_error
from ..types.results import PipelineResult, TargetOutcome


class DeploymentPipeline(LoggingMixin):
    """
    Deploys canisters one at a time in configured order.

    The argument for each target is built, including canister id lookups,
    before its `dfx deploy` is spawned. Lookups and deploys both go to the
    client's configured network; select another network through
    `dfx.network` in the configuration. The first failure stops the run:
    earlier targets stay deployed and later ones are reported as skipped.
    """

    def __init__(self, config: DeploymentConfig, client: DfxClient,
                 builder: Optional[ArgumentBuilder] = None):
        self.config = config
        self.client = client
        self.builder = builder or ArgumentBuilder(client)

    def run(self, targets: List[str], mode: str = "reinstall",
            dry_run: bool = False) -> PipelineResult:
        network = self.client.network

        missing = [t for t in targets if not self.config.has_target(t, mode)]
        if missing:
            raise create_validation_error(f"No configuration for targets: {missing}",
                                          target=",".join(missing))

        ordered = self.config.ordered(targets)
        result = PipelineResult(network=network, mode=mode)
        self.log_info(f"Deploying {len(ordered)} target(s): {', '.join(ordered)}",
                      network=network, mode=mode)

        for i, target in enumerate(ordered):
            outcome = self._run_target(target, mode, network, dry_run)
            result.outcomes.append(outcome)

            if outcome.status == "failed":
                for skipped in ordered[i + 1:]:
                    self.log_warning("Skipping target after earlier failure", target=skipped)
                    result.outcomes.append(TargetOutcome(target=skipped, status="skipped"))
                break

        if result.success:
            self.log_info("Deployment run finished", network=network, mode=mode)
        else:
            self.log_error("Deployment run stopped", network=network, mode=mode,
                           returncode=result.returncode)
        return result

    def _run_target(self, target: str, mode: str, network: str, dry_run: bool) -> TargetOutcome:
        try:
            argument = self.builder.build(target, self.config, mode)
        except DeployerError as e:
            self.log_error("Could not build argument", target=target, error=str(e))
            return TargetOutcome(target=target, status="failed", error=str(e),
                                 error_type=e.error_type, exit_code=e.exit_code)

        if dry_run:
            self.log_info("Dry run, not deploying", target=target, network=network, mode=mode)
            return TargetOutcome(target=target, status="dry_run", argument=argument)

        try:
            deployed = self.client.deploy(target, argument, mode, network)
        except DeploymentFailed as e:
            return TargetOutcome(target=target, status="failed", argument=argument,
                                 result=e.result, error=e.output or str(e),
                                 error_type=e.error_type, exit_code=e.exit_code)

        return TargetOutcome(target=target, status="deployed", argument=argument, result=deployed)
