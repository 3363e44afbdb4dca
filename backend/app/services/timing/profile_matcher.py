"""Resolve requested items to catalog timing profiles."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set

from app.api.schemas.timing import ItemProfile, ScheduleInputItem, TimingProfile

logger = logging.getLogger(__name__)


@dataclass
class MatchedItem:
    index: int
    item: ScheduleInputItem
    profile: ItemProfile
    matched: bool

    @property
    def tags(self) -> Set[str]:
        return set(self.profile.tags)

    @property
    def timing(self) -> TimingProfile:
        return self.profile.timing


def default_profile(item: ScheduleInputItem) -> ItemProfile:
    """Conservative stand-in for items the catalog does not know."""
    return ItemProfile(
        canonical_name=item.canonical_name,
        display_name=item.display_name,
        kind="supplement",
        tags=[],
        timing=TimingProfile(flexible=True),
    )


def attach_profiles(items: Iterable[ScheduleInputItem], profiles: Iterable[ItemProfile]) -> List[MatchedItem]:
    profile_map: Dict[str, ItemProfile] = {}
    for profile in profiles:
        profile_map.setdefault(profile.canonical_name, profile)

    matched: List[MatchedItem] = []
    for index, item in enumerate(items):
        profile = profile_map.get(item.canonical_name)
        if profile is None:
            logger.debug("No timing profile for %s; using default", item.canonical_name)
            matched.append(MatchedItem(index=index, item=item, profile=default_profile(item), matched=False))
        else:
            matched.append(MatchedItem(index=index, item=item, profile=profile, matched=True))
    return matched
