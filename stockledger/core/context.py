from dataclasses import dataclass, field
from typing import Optional

from stockledger.config import Settings, get_settings


@dataclass(frozen=True)
class RequestContext:
    """Caller details handed to services explicitly instead of read from globals."""

    operator_name: Optional[str] = None
    settings: Settings = field(default_factory=get_settings)

    @property
    def operator_label(self) -> str:
        return self.operator_name or "system"


__all__ = ["RequestContext"]
