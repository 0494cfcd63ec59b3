"""Orchestration layer - avatar moderation state machine."""

from unitportal.orchestration.state_machine import (
    AvatarModeration,
    AvatarRequest,
    can_transition,
    valid_transitions,
)
from unitportal.kernel.models.personnel import AvatarState

__all__ = [
    "AvatarModeration",
    "AvatarRequest",
    "AvatarState",
    "can_transition",
    "valid_transitions",
]
