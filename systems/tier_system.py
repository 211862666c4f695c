"""
Tier System
Static ordered tier bands and point-to-tier lookup for TantalusBot
"""

import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple
from config import TIERS

logger = logging.getLogger('TantalusBot.Tiers')

@dataclass(frozen=True)
class TierDefinition:
    name: str
    min_points: int
    max_points: Optional[int]  # None = unbounded
    color: int
    benefits: Tuple[str, ...] = ()

    def contains(self, points: int) -> bool:
        if points < self.min_points:
            return False
        return self.max_points is None or points <= self.max_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'min_points': self.min_points,
            'max_points': self.max_points,
            'color': self.color,
            'benefits': list(self.benefits),
        }


class TierTable:
    def __init__(self, tiers: Optional[List[Dict[str, Any]]] = None):
        """
        Build the tier table from configuration

        Args:
            tiers: Tier band dicts ordered by min_points (defaults to config.TIERS)

        Raises:
            ValueError: If the bands are not contiguous, ordered and non-overlapping
        """
        self.tiers = [
            TierDefinition(
                name=tier['name'],
                min_points=tier['min_points'],
                max_points=tier.get('max_points'),
                color=tier.get('color', 0),
                benefits=tuple(tier.get('benefits', ())),
            )
            for tier in (tiers if tiers is not None else TIERS)
        ]
        self._validate()
        self._by_name = {tier.name.lower(): tier for tier in self.tiers}

    def _validate(self):
        if not self.tiers:
            raise ValueError('At least one tier is required')

        for lower, upper in zip(self.tiers, self.tiers[1:]):
            if lower.max_points is None:
                raise ValueError(f'Only the top tier may be unbounded, found {lower.name}')
            if upper.min_points != lower.max_points + 1:
                raise ValueError(
                    f'Tiers {lower.name} and {upper.name} are not contiguous '
                    f'({lower.max_points} -> {upper.min_points})'
                )

        if self.tiers[-1].max_points is not None:
            raise ValueError(f'Top tier {self.tiers[-1].name} must be unbounded')

    @property
    def lowest(self) -> TierDefinition:
        return self.tiers[0]

    @property
    def highest(self) -> TierDefinition:
        return self.tiers[-1]

    def tier_for(self, points: int) -> TierDefinition:
        """
        Get the tier band containing a point total

        Totals below the lowest band's minimum resolve to the lowest band.
        """
        if points < self.lowest.min_points:
            return self.lowest

        for tier in self.tiers:
            if tier.contains(points):
                return tier

        return self.highest

    def get_tier(self, name: str) -> Optional[TierDefinition]:
        """Get a tier by name (case-insensitive)"""
        if not name:
            return None
        return self._by_name.get(name.lower())

    def rank_of(self, name: str) -> int:
        """Index of a tier from lowest (0) to highest; -1 if unknown"""
        tier = self.get_tier(name)
        return self.tiers.index(tier) if tier else -1

    def next_tier(self, name: str) -> Optional[TierDefinition]:
        rank = self.rank_of(name)
        if rank < 0 or rank + 1 >= len(self.tiers):
            return None
        return self.tiers[rank + 1]

    def previous_tier(self, name: str) -> Optional[TierDefinition]:
        rank = self.rank_of(name)
        if rank <= 0:
            return None
        return self.tiers[rank - 1]

    def all_tiers(self) -> List[TierDefinition]:
        return list(self.tiers)
