"""
Deployment configuration.

Reads the ``conf`` document (YAML or JSON) that names the AWS profile and the
ordered list of stacks to deploy, and resolves the boto3 session from it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import boto3
import jsonschema
import yaml
from botocore.exceptions import BotoCoreError, ProfileNotFound

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_NAME = "conf"
CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
DEFAULT_TIMEOUT = 600

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "awsprofile": {"type": ["string", "null"]},
        "region": {"type": ["string", "null"]},
        "timeout": {"type": "integer", "exclusiveMinimum": 0},
        "stacks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "template": {"type": "string", "minLength": 1},
                },
                "required": ["name", "template"],
            },
        },
    },
    "required": ["stacks"],
}


def _lower_keys(data: Dict[Any, Any]) -> Dict[str, Any]:
    return {str(k).lower(): v for k, v in data.items()}


@dataclass(frozen=True)
class StackSpec:
    """A stack to deploy: its CloudFormation name and template file."""

    name: str
    template_path: str


@dataclass
class DeployConfig:
    """Settings for one deployment run."""

    stacks: List[StackSpec] = field(default_factory=list)
    aws_profile: Optional[str] = None
    aws_region: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    source: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "DeployConfig":
        """Create config from a parsed document.

        Args:
            data: Parsed configuration document
            base_dir: Directory relative template paths resolve against

        Raises:
            ConfigError: If the document does not match the schema
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        # Keys are case-insensitive
        data = _lower_keys(data)
        if isinstance(data.get("stacks"), list):
            data["stacks"] = [
                _lower_keys(stack) if isinstance(stack, dict) else stack
                for stack in data["stacks"]
            ]

        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigError(f"Invalid configuration at {location}: {e.message}") from e

        stacks = []
        for stack in data["stacks"]:
            template_path = Path(stack["template"])
            if base_dir and not template_path.is_absolute():
                template_path = base_dir / template_path
            stacks.append(StackSpec(name=stack["name"], template_path=str(template_path)))

        return cls(
            stacks=stacks,
            aws_profile=data.get("awsprofile") or None,
            aws_region=data.get("region") or None,
            timeout=data.get("timeout", DEFAULT_TIMEOUT),
        )


def find_config_file(config_dir: Optional[Union[str, Path]] = None) -> Path:
    """Find ``conf.yaml``, ``conf.yml`` or ``conf.json`` in a directory."""
    directory = Path(config_dir) if config_dir else Path.cwd()

    for extension in CONFIG_EXTENSIONS:
        candidate = directory / f"{CONFIG_NAME}{extension}"
        if candidate.is_file():
            return candidate

    raise ConfigError(
        f"No {CONFIG_NAME}{{{','.join(CONFIG_EXTENSIONS)}}} found in {directory}"
    )


def load_config(config_path: Optional[Union[str, Path]] = None) -> DeployConfig:
    """
    Load deployment configuration.

    Args:
        config_path: Config file, or a directory to search. Defaults to the
            current directory.

    Returns:
        Parsed and validated DeployConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(config_path) if config_path else None
    if path is None or path.is_dir():
        path = find_config_file(path)
    elif not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    logger.debug("Reading configuration from %s", path)

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read configuration {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse configuration {path}: {e}") from e

    if data is None:
        raise ConfigError(f"Configuration {path} is empty")

    config = DeployConfig.from_dict(data, base_dir=path.parent)
    config.source = path
    return config


def create_session(config: DeployConfig) -> boto3.Session:
    """Create AWS session for the configured profile and region.

    Raises:
        ConfigError: If the profile does not exist or no region can be resolved
    """
    session_args: Dict[str, Any] = {}
    if config.aws_region:
        session_args["region_name"] = config.aws_region
    if config.aws_profile:
        session_args["profile_name"] = config.aws_profile

    try:
        session = boto3.Session(**session_args)
    except ProfileNotFound as e:
        raise ConfigError(str(e)) from e
    except BotoCoreError as e:
        raise ConfigError(f"Failed to initialize AWS session: {e}") from e

    if not session.region_name:
        raise ConfigError(
            "No AWS region configured. Set 'region' in the configuration, "
            "the profile's region, or AWS_DEFAULT_REGION."
        )

    return session
