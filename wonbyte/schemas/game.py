"""
Game/reward schemas for Wonbyte.

Defines Pydantic models for:
- The learner's game snapshot (level, exp, points, badges, inventory)
- The reward catalog loaded from rewards.yaml (badges, characters,
  shop items, quests, per-event reward amounts, leveling rules)
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from wonbyte.utils.catalog_loader import load_catalog_file

# Metrics a badge or quest can be measured against
KNOWN_METRICS = {
    'problems_solved',
    'weekly_streak',
    'active_days',
    'level',
    'today_texts',
    'today_vocabulary',
    'today_problems',
    'today_time',
    'week_texts',
    'week_vocabulary',
    'week_accuracy',
}


def _unique(v: list[str]) -> list[str]:
    return list(dict.fromkeys(v))


# -----------------------------------------------------------------------------
# Learner snapshot
# -----------------------------------------------------------------------------

class GameData(BaseModel):
    """Points, experience and unlocks for one learner."""
    level: int = Field(default=1, ge=1)
    exp: int = Field(default=0, ge=0)
    points: int = 0              # spending is checked by callers, never clamped
    badges: list[str] = []
    character: str = "buddy"
    character_level: int = Field(default=1, ge=1)
    items: list[str] = []        # purchased shop item ids, one per purchase
    achievements: list[str] = []
    claimed_quests: list[str] = []   # "<quest_id>@<period key>"
    last_login_date: Optional[str] = None

    @field_validator('badges', 'achievements', 'claimed_quests')
    @classmethod
    def no_duplicates(cls, v):
        return _unique(v)


# -----------------------------------------------------------------------------
# Reward catalog
# -----------------------------------------------------------------------------

class QuestPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class LevelRules(BaseModel):
    exp_per_level: int = Field(default=100, ge=1)   # threshold = level * exp_per_level
    level_up_bonus: int = Field(default=50, ge=0)
    badge_bonus: int = Field(default=20, ge=0)


class RewardRule(BaseModel):
    points: int = 0
    exp: int = Field(default=0, ge=0)


class BadgeDefinition(BaseModel):
    id: str = Field(..., pattern=r'^[a-z][a-z0-9_]*$')
    name: str
    description: str = ""
    icon: str = ""
    metric: Optional[str] = None      # None: unlocked by an event, not a threshold
    threshold: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode='after')
    def metric_has_threshold(self):
        if self.metric is not None:
            if self.metric not in KNOWN_METRICS:
                raise ValueError(f'Unknown badge metric: {self.metric}')
            if self.threshold is None:
                raise ValueError(f'Badge {self.id} has a metric but no threshold')
        return self


class CharacterDefinition(BaseModel):
    id: str
    name: str
    description: str = ""
    icon: str = ""
    required_level: int = Field(default=1, ge=1)


class ShopItem(BaseModel):
    id: str
    name: str
    description: str = ""
    icon: str = ""
    cost: int = Field(..., ge=0)


class QuestDefinition(BaseModel):
    id: str
    name: str
    description: str = ""
    period: QuestPeriod
    metric: str
    target: int = Field(..., ge=1)
    reward: int = Field(..., ge=0)

    @field_validator('metric')
    @classmethod
    def metric_known(cls, v):
        if v not in KNOWN_METRICS:
            raise ValueError(f'Unknown quest metric: {v}')
        return v


class RewardCatalog(BaseModel):
    """Everything the game ledger and coordinator award, in one document."""
    leveling: LevelRules = LevelRules()
    rewards: dict[str, RewardRule] = {}
    badges: list[BadgeDefinition] = []
    characters: list[CharacterDefinition] = []
    shop: list[ShopItem] = []
    quests: list[QuestDefinition] = []

    @model_validator(mode='after')
    def ids_unique(self):
        for name in ('badges', 'characters', 'shop', 'quests'):
            ids = [entry.id for entry in getattr(self, name)]
            if len(ids) != len(set(ids)):
                raise ValueError(f'Duplicate ids in {name}')
        return self

    def reward(self, event: str) -> RewardRule:
        """Reward for an event; events missing from the catalog grant nothing."""
        return self.rewards.get(event, RewardRule())

    def badge(self, badge_id: str) -> Optional[BadgeDefinition]:
        return next((b for b in self.badges if b.id == badge_id), None)

    def character(self, character_id: str) -> Optional[CharacterDefinition]:
        return next((c for c in self.characters if c.id == character_id), None)

    def item(self, item_id: str) -> Optional[ShopItem]:
        return next((i for i in self.shop if i.id == item_id), None)

    def quest(self, quest_id: str) -> Optional[QuestDefinition]:
        return next((q for q in self.quests if q.id == quest_id), None)

    @classmethod
    def from_yaml(cls, path: Path) -> "RewardCatalog":
        """Load and validate a catalog file."""
        return cls.model_validate(load_catalog_file(path))
