"""
stackdeploy - Declarative CloudFormation stack deployments.
"""

__version__ = "1.0.0"

from .config import DeployConfig, StackSpec, load_config

__all__ = ["DeployConfig", "StackSpec", "load_config"]
