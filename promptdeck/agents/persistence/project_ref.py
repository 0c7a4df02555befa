"""
Tier-qualified project identifiers.

The string form keeps the historical prefixes (``local_``, ``temp_``, bare for
the primary tier) so ids stored by older clients still route correctly.
"""

import time
import uuid
from dataclasses import dataclass

from promptdeck.agents import config as global_config
from promptdeck.models.project import StorageTier

_PREFIXES = {
    StorageTier.DURABLE_LOCAL: global_config.LOCAL_ID_PREFIX,
    StorageTier.EPHEMERAL: global_config.TEMP_ID_PREFIX,
}


def _local_suffix() -> str:
    # Millisecond timestamp plus a short random part, unique within a device
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


@dataclass(frozen=True)
class ProjectRef:
    tier: StorageTier
    key: str

    @classmethod
    def parse(cls, value: str) -> "ProjectRef":
        """Route a string id to its tier by prefix."""
        if not value:
            raise ValueError("Project id must not be empty")
        for tier, prefix in _PREFIXES.items():
            if value.startswith(prefix):
                return cls(tier, value[len(prefix):])
        return cls(StorageTier.PRIMARY, value)

    @classmethod
    def coerce(cls, value) -> "ProjectRef":
        return value if isinstance(value, ProjectRef) else cls.parse(value)

    @classmethod
    def new_primary(cls) -> "ProjectRef":
        return cls(StorageTier.PRIMARY, str(uuid.uuid4()))

    @classmethod
    def new_local(cls) -> "ProjectRef":
        return cls(StorageTier.DURABLE_LOCAL, _local_suffix())

    @classmethod
    def new_temporary(cls) -> "ProjectRef":
        return cls(StorageTier.EPHEMERAL, _local_suffix())

    def __str__(self) -> str:
        return f"{_PREFIXES.get(self.tier, '')}{self.key}"
