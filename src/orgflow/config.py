"""Configuration for orgflow."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration, read from ``ORGFLOW_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="ORGFLOW_")

    basefolder: str = Field(default="/home/sweet/home")
    document_name: str = Field(default="refile.org")
    strict_load: bool = Field(default=True)
    watch: bool = Field(default=True)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    def document_path(self) -> Path:
        """Absolute path of the document file."""
        return (Path(self.basefolder) / self.document_name).absolute()
