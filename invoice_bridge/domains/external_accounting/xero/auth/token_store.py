import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .models import StoredTokenSet

logger = logging.getLogger(__name__)


class TokenStore:
    """Persists the Xero token set as a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[StoredTokenSet]:
        """Return the saved token set, or None when absent or unreadable."""
        if not self.path.exists():
            return None

        try:
            return StoredTokenSet.model_validate_json(self.path.read_text("utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def save(self, tokens: StoredTokenSet) -> None:
        """Write the token set, replacing the previous file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(tokens.model_dump_json(indent=2), "utf-8")
        os.replace(tmp_path, self.path)
        logger.info(f"Saved Xero tokens to {self.path}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
