"""
Core data models
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ParseStatus(str, Enum):
    """Result of scanning the stream buffer for one response frame"""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class ParseOutcome:
    """Frame parser result: the status plus blocks or a failure reason."""

    status: ParseStatus
    blocks: List[bytes] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def complete(cls, blocks: List[bytes]) -> "ParseOutcome":
        return cls(ParseStatus.COMPLETE, blocks=blocks)

    @classmethod
    def incomplete(cls) -> "ParseOutcome":
        return cls(ParseStatus.INCOMPLETE)

    @classmethod
    def corrupt(cls, reason: str) -> "ParseOutcome":
        return cls(ParseStatus.CORRUPT, reason=reason)

    @property
    def is_complete(self) -> bool:
        return self.status is ParseStatus.COMPLETE

    @property
    def is_incomplete(self) -> bool:
        return self.status is ParseStatus.INCOMPLETE

    @property
    def is_corrupt(self) -> bool:
        return self.status is ParseStatus.CORRUPT
