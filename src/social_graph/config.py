from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"


class Neo4jSettingsModel(BaseSettings):
    """Connection details for the Neo4j database."""

    uri: str = "neo4j://localhost:7687"
    user: str = "neo4j"
    password: str = "password"
    # Raw toggle string; parsed by connection.is_encryption_enabled
    encrypted: Optional[str] = None
    database: str = "neo4j"

    model_config = SettingsConfigDict(env_prefix="NEO4J_", env_file=".env", extra="ignore")


class AppSettingsModel(BaseModel):
    """Process-level settings."""

    name: str = "social-graph"
    log_level: str = "INFO"


class SettingsFileModel(BaseModel):
    """Schema for validating `settings.yaml`."""

    app: AppSettingsModel = Field(default_factory=AppSettingsModel)
    neo4j: dict[str, Any] = Field(default_factory=dict)

    model_config = SettingsConfigDict(extra="forbid")


class RuntimeSettings(BaseSettings):
    """Central runtime settings loaded from YAML and environment."""

    app: AppSettingsModel = Field(
        default_factory=AppSettingsModel,
        description="Process configuration",
    )
    neo4j: Neo4jSettingsModel = Field(
        default_factory=Neo4jSettingsModel,
        description="Neo4j connection options",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_nested_delimiter="__", extra="ignore"
    )


def validate_config_schema(config_data: dict) -> bool:
    """Validate settings data against the Pydantic schema."""

    try:
        SettingsFileModel.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
    return True


def load_runtime_settings(path: Optional[Union[str, Path]] = None) -> RuntimeSettings:
    """
    Load runtime settings from a YAML file and environment variables.

    Values from the YAML file act as defaults; ``NEO4J_*`` environment
    variables win over them for the connection section.
    """
    yaml_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    data: dict[str, Any] = {}
    if yaml_path.exists():
        with open(yaml_path) as fh:
            data = yaml.safe_load(fh) or {}
        validate_config_schema(data)

    from_env = Neo4jSettingsModel()
    merged = dict(data.get("neo4j", {}))
    merged.update(
        {key: getattr(from_env, key) for key in from_env.model_fields_set}
    )
    # Init kwargs take priority over env in pydantic-settings
    neo4j_settings = Neo4jSettingsModel(**merged)
    app_settings = AppSettingsModel(**data.get("app", {}))
    return RuntimeSettings(app=app_settings, neo4j=neo4j_settings)
