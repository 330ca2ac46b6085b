from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from .errors import ConfigurationError
from .models import SelectionPolicy

class Settings(BaseSettings):
    curseforge_api_key: str = Field(default="", alias="CURSEFORGE_API_KEY")
    curseforge_api_base: str = Field(default="https://api.curseforge.com/v1", alias="CURSEFORGE_API_BASE")
    project_id: int = Field(default=1356598, alias="CURSEFORGE_PROJECT_ID")  # All the Mons - ATMons
    page_size: int = Field(default=50, ge=1, le=50, alias="CURSEFORGE_PAGE_SIZE")
    http_timeout: Optional[float] = Field(default=None, alias="CURSEFORGE_TIMEOUT")

    launch_file: Path = Field(default=Path("launch.sh"), alias="LAUNCH_FILE")
    selection_policy: SelectionPolicy = Field(default=SelectionPolicy.POINTER, alias="SELECTION_POLICY")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_file: Optional[Path] = Field(default=None, alias="LOG_FILE")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    def require_api_key(self) -> str:
        key = self.curseforge_api_key.strip()
        if not key:
            raise ConfigurationError("Missing required env var: CURSEFORGE_API_KEY")
        return key
