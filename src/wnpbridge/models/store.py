"""JSON file store for the bridge configuration.

A `ConfigStore` owns one file path. Writes go through a sibling ``.tmp``
file that is renamed over the target, and the previous contents are kept
as ``.bak`` so a bad ``config set`` can be rolled back by hand. A file
that exists but cannot be parsed is reported, never replaced with
defaults.
"""

import logging
import shutil
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from wnpbridge.exceptions import ConfigFileInvalidError, ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class ConfigStore(Generic[M]):
    """
    Load and save one pydantic model at a fixed path.

    Usage Example:
        ```python
        store = ConfigStore(Path("~/.wnpbridge/config.json").expanduser(), BridgeConfig)
        config = store.read_or_default()
        store.write(config.with_overrides(port=51827))
        ```
    """

    def __init__(self, path: Path, model_type: type[M]):
        self.path = path
        self.model_type = model_type

    @property
    def backup_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".bak")

    @property
    def temp_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".tmp")

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> M:
        """
        Parse and validate the file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file is empty or not valid JSON
            ConfigValidationError: If a value fails validation
        """
        return self._read(self.path)

    def read_backup(self) -> M:
        """Parse the ``.bak`` copy left by the last write."""
        return self._read(self.backup_path)

    def read_or_default(self) -> M:
        """Read the file, or return a default model if there is none.

        The default is not written to disk.
        """
        try:
            return self.read()
        except FileNotFoundError:
            logger.info(f"No config at {self.path}, using defaults")
            return self.model_type()

    def write(self, data: M, backup: bool = True) -> None:
        """
        Save `data` atomically, keeping the previous file as ``.bak``.

        Raises:
            OSError: If the directory or file cannot be written
            ConfigurationError: If the model cannot be serialized
        """
        name = type(data).__name__
        try:
            content = data.model_dump_json(indent=2)
        except ValueError as e:
            raise ConfigurationError(
                user_message=f"Failed to save configuration to {self.path}",
                technical_message=f"Could not serialize {name}: {e}",
            ) from e

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if backup and self.path.exists():
            shutil.copy2(self.path, self.backup_path)
            logger.debug(f"Backed up {self.path} to {self.backup_path}")

        try:
            self.temp_path.write_text(content, encoding="utf-8")
            self.temp_path.replace(self.path)
        except OSError as e:
            logger.error(f"Could not write {name} to {self.path}: {e}")
            raise
        finally:
            if self.temp_path.exists():
                self.temp_path.unlink()

        logger.debug(f"Saved {name} to {self.path}")

    def _read(self, path: Path) -> M:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigFileInvalidError(str(path), f"Unreadable: {e}") from e

        if not content.strip():
            raise ConfigFileInvalidError(str(path), "File is empty")

        try:
            model = self.model_type.model_validate_json(content)
        except ValidationError as e:
            logger.error(f"Invalid config in {path}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {self.model_type.__name__} from {path}")
        return model
