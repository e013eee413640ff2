"""
Project configuration store.

Reads and writes the JSON project configuration (``loaderkit.json`` by
default). The loaded ProjectConfig is passed explicitly to each component;
this module owns only its persistence format.
"""

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigurationError
from .models import ProjectConfig

logger = logging.getLogger(__name__)


class ConfigStore:
    """
    Load/save a ProjectConfig from a JSON file.

    Features:
    - Missing file loads as a default configuration
    - Atomic writes (temporary file + rename)
    """

    def __init__(self, config_file: Path):
        """
        Initialize ConfigStore.

        Args:
            config_file: Path to the project configuration file
        """
        self.config_file = Path(config_file).resolve()

    @property
    def exists(self) -> bool:
        return self.config_file.exists()

    async def load(self) -> ProjectConfig:
        """
        Load the project configuration.

        Returns:
            ProjectConfig with ``base_dir`` set to the config file's directory

        Raises:
            ConfigurationError: If the file exists but is not a valid configuration
        """
        return await asyncio.to_thread(self._load)

    async def save(self, config: ProjectConfig) -> None:
        """
        Save the project configuration.

        Args:
            config: ProjectConfig to save

        Raises:
            ConfigurationError: If the file could not be written
        """
        await asyncio.to_thread(self._save, config)

    def _load(self) -> ProjectConfig:
        base_dir = self.config_file.parent
        if not self.config_file.exists():
            logger.debug(f"Config file {self.config_file} does not exist, using defaults")
            return ProjectConfig(base_dir=base_dir)

        try:
            data = json.loads(self.config_file.read_text(encoding="utf-8"))
            config = ProjectConfig.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            raise ConfigurationError(
                f"Could not read config file {self.config_file}: {e}"
            ) from e

        config.base_dir = base_dir
        return config

    def _save(self, config: ProjectConfig) -> None:
        data = config.model_dump(mode="json", by_alias=True, exclude_none=True)

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            # Write to temporary file first, then rename (atomic operation)
            temp_file = self.config_file.with_suffix(".tmp")
            temp_file.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            temp_file.replace(self.config_file)
        except OSError as e:
            raise ConfigurationError(
                f"Could not save config file {self.config_file}: {e}"
            ) from e

        logger.debug(f"Saved config to {self.config_file}")
