# deployer/pipeline/__init__.py

from .deployment_pipeline import DeploymentPipeline
