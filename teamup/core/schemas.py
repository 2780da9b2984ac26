from pydantic import BaseModel
from typing import Dict, Any


class PatchModel(BaseModel):
    """Base for partial-update bodies"""

    def to_patch(self) -> Dict[str, Any]:
        """Return only the supplied fields; null values and empty strings are skipped."""
        patch = {}
        for key, value in self.model_dump(mode="json", exclude_unset=True).items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            patch[key] = value
        return patch
