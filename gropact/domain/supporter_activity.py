"""Supporter activity feed entry"""
from typing import Literal

from gropact.domain.base import Entity


class SupporterActivity(Entity):
    id: str
    type: Literal["encouragement", "verification", "nudge", "reaction"]
    supporter_name: str
    pact_title: str = ""
    pact_id: str = ""
    content: str
    created_at: str
