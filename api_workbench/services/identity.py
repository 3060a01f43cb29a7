"""
Entity identity: preferred id with a display-name fallback.

Entities loaded from legacy documents or hand-made directories may have no
id. Matching then falls back to the name, and callers are told which tier
matched so they can warn about ambiguous name matches.

Ids synthesized on load are derived from the entity's position in the
project (a hash of its path segments), so reloading an unmanaged directory
yields the same ids every time.
"""

import hashlib
from dataclasses import dataclass
from typing import Any, Optional

# Prefixes for synthesized ids, one per entity kind
SUITE_PREFIX = "suite"
CASE_PREFIX = "tc"
STEP_PREFIX = "step"
REQUEST_PREFIX = "req"
FOLDER_PREFIX = "folder"


@dataclass(frozen=True)
class IdentityKey:
    """Two-tier identity of an entity."""
    preferred_id: Optional[str]
    fallback_name: str

    @classmethod
    def of(cls, entity: Any) -> "IdentityKey":
        return cls(getattr(entity, "id", None), entity.name)

    def matches(self, target: str, id_only: bool = False) -> Optional[bool]:
        """
        Compare against ``target``.

        Returns True when matched by id, False when matched by name, and
        None when there is no match. With ``id_only`` the name tier is
        never consulted.
        """
        if self.preferred_id:
            return True if self.preferred_id == target else None
        if id_only:
            return None
        return False if self.fallback_name == target else None


def synthesize_id(prefix: str, *path_parts: str) -> str:
    """
    Build a deterministic id for an entity that has none on disk.

    Args:
        prefix: Kind prefix, e.g. "suite" or "tc".
        path_parts: Path segments from the project root to the entity.
    """
    digest = hashlib.sha1("/".join(path_parts).encode("utf-8")).hexdigest()
    return f"{prefix}-{digest[:12]}"
