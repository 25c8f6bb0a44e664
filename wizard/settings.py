"""
Runtime settings and logging setup for the WiZard CLI
"""

import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from .transport import DEFAULT_TIMEOUT

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """CLI settings"""
    log_level: str = Field("WARNING", description="Logging level")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, le=60, description="Reply timeout in seconds")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "Settings":
        """
        Load settings from the environment

        A .env file is loaded first (without overriding variables that are
        already set). Precedence:
            1. Explicit overrides that are not None (CLI flags)
            2. WIZARD_LOG_LEVEL / WIZARD_TIMEOUT
            3. LOG_LEVEL
            4. Defaults

        Raises:
            pydantic.ValidationError: If a value is out of range
        """
        env_path = env_file or find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(env_path, override=False)

        values = {}
        log_level = os.getenv('WIZARD_LOG_LEVEL') or os.getenv('LOG_LEVEL')
        if log_level:
            values['log_level'] = log_level
        timeout = os.getenv('WIZARD_TIMEOUT')
        if timeout:
            values['timeout'] = timeout

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def setup_logging(level: str = "WARNING"):
    """Setup logging for the CLI process"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT
    )
