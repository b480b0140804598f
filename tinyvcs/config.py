"""
Configuration management for tinyvcs.

This module provides centralized configuration for all components:
- Repository layout and naming defaults
- Merge behavior
- Logging settings
"""

import os
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

SplitPointStrategyName = Literal["first_parent", "generation"]
LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RepositoryConfig(BaseModel):
    """Configuration for the on-disk repository."""

    metadata_dir: str = Field(
        default=".tinyvcs",
        description="Name of the metadata directory inside the working directory",
    )
    default_branch: str = Field(
        default="master", description="Branch created by init"
    )
    initial_message: str = Field(
        default="initial commit", description="Message of the root commit"
    )
    abbreviated_id_length: int = Field(
        default=7,
        gt=0,
        le=40,
        description="Length of abbreviated ids in merge log lines",
    )


class MergeConfig(BaseModel):
    """Configuration for the merge engine."""

    split_point_strategy: SplitPointStrategyName = Field(
        default="first_parent",
        description="How the split point of two branches is found",
    )


class LogConfig(BaseModel):
    """Configuration for logging system."""

    level: LogLevel = Field(default="WARNING", description="Logging level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[component]}</cyan> | "
        "<level>{message}</level>",
        description="Log message format",
    )
    rotation: str = Field(default="10 MB", description="Log file rotation size")
    retention: str = Field(default="1 month", description="Log file retention period")
    log_dir: str = Field(default="logs", description="Directory for log files")
    enable_file_logging: bool = Field(
        default=False, description="Whether to enable file logging"
    )
    enable_console_logging: bool = Field(
        default=True, description="Whether to enable console logging"
    )


class Config(BaseModel):
    """Main configuration object for tinyvcs."""

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls(
            repository=RepositoryConfig(
                metadata_dir=os.getenv("TINYVCS_DIR", ".tinyvcs"),
                default_branch=os.getenv("TINYVCS_DEFAULT_BRANCH", "master"),
            ),
            merge=MergeConfig(
                split_point_strategy=cast(
                    SplitPointStrategyName,
                    os.getenv("TINYVCS_SPLIT_POINT", "first_parent"),
                )
            ),
            logging=LogConfig(
                level=cast(LogLevel, os.getenv("LOG_LEVEL", "WARNING")),
                log_dir=os.getenv("TINYVCS_LOG_DIR", "logs"),
                enable_file_logging=os.getenv("TINYVCS_LOG_TO_FILE", "").lower()
                in ("1", "true", "yes"),
            ),
        )


# Global configuration instance
config = Config.from_env()
