"""
Configuration settings for toolshim.
"""

import sys
from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings


class InstallerConfig(BaseModel):
    """Package installer configuration."""
    python: Path = Field(
        default_factory=lambda: Path(sys.executable),
        description="Interpreter whose pip installs packages into tool environments"
    )
    quiet_warnings: bool = Field(default=True, description="Set PYTHONWARNINGS=ignore for pip")


class ProjectConfig(BaseModel):
    """Project layout configuration."""
    venv_dir_name: str = Field(default=".venv", description="Project environment directory name")
    scripts_table: str = Field(default="toolshim", description="Name of the [tool.<name>.scripts] table")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="WARNING", description="Console logging level")
    file_path: Optional[Path] = Field(default=None, description="Log file; defaults to <home>/logs/toolshim.log")
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")


class Settings(BaseSettings):
    """Main application settings."""
    home: Path = Field(default=Path("~/.toolshim"), description="Application directory")
    default_python: Optional[str] = Field(None, description="Interpreter request used when --python is omitted")

    # Component configs
    installer: InstallerConfig = Field(default_factory=InstallerConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        env_prefix = "TOOLSHIM_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"  # Ignore extra fields from environment

    @validator('home', always=True)
    def expand_home(cls, v):
        return Path(v).expanduser().absolute()

    @property
    def shims_dir(self) -> Path:
        return self.home / "shims"

    @property
    def tools_dir(self) -> Path:
        return self.home / "tools"

    @property
    def log_file(self) -> Path:
        return self.logging.file_path or self.home / "logs" / "toolshim.log"
