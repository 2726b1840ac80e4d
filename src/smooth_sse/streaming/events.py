"""Value types passed between the streaming stages."""

import json
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class StructuredEvent:
    """One dispatched Server-Sent Event."""
    type: str = "message"
    data: str = ""
    last_event_id: str = ""

    def json(self) -> Any:
        """Parse ``data`` as JSON.

        Raises:
            ValueError: If ``data`` is not valid JSON
        """
        return json.loads(self.data)

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type,
            "data": self.data,
            "lastEventId": self.last_event_id,
        }


@dataclass(frozen=True)
class NormalizedFragment:
    """A payload rewritten to carry a single character of new text."""
    data: Any
    chunk: str


__all__ = ['StructuredEvent', 'NormalizedFragment']
