from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Union

from ..leaves.model import LeaveRequest


@dataclass(frozen=True)
class LeaveApplied:
    """Emitted after a leave request is persisted as Pending."""

    leave: LeaveRequest


@dataclass(frozen=True)
class LeaveDecided:
    """Emitted after a reviewer approves or rejects a request."""

    leave: LeaveRequest
    reviewer_user_id: Optional[int] = None


LedgerEvent = Union[LeaveApplied, LeaveDecided]


class EventPublisher(Protocol):
    def publish(self, event: LedgerEvent) -> None:
        raise NotImplementedError


class NullPublisher:
    """Publisher that drops every event (used when no sink is wired)."""

    def publish(self, event: LedgerEvent) -> None:
        return None
