"""
GameLedger - points, experience, levels, badges and the reward shop.

Level-ups roll over: while exp reaches the current level's threshold
(level * exp_per_level) that threshold is subtracted, the level goes up
and the level-up bonus is paid. Thresholds grow with level, so one large
grant may cross several levels, each at its own threshold.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ValidationError

from wonbyte.config import load_settings
from wonbyte.schemas import CharacterDefinition, GameData, RewardCatalog
from wonbyte.utils.dates import Clock, date_key

from .base import Ledger, as_patch
from .store import KeyValueStore, StorageKey

logger = logging.getLogger(__name__)


class InsufficientPointsError(ValueError):
    """Raised when a purchase costs more than the current balance."""

    def __init__(self, item_id: str, cost: int, balance: int):
        super().__init__(f"Cannot buy {item_id}: costs {cost} points, balance is {balance}")
        self.item_id = item_id
        self.cost = cost
        self.balance = balance


@lru_cache(maxsize=8)
def _load_catalog_cached(path: Path) -> RewardCatalog:
    return RewardCatalog.from_yaml(path)


def load_reward_catalog(path: Optional[Path] = None) -> RewardCatalog:
    """Load the reward catalog (configured path, or the bundled rewards.yaml)."""
    return _load_catalog_cached(Path(path or load_settings().rewards_path))


class GameLedger(Ledger):
    """Reward state for one learner, driven by the reward catalog."""

    key = StorageKey.GAME_DATA

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        clock: Optional[Clock] = None,
        catalog: Optional[RewardCatalog] = None,
    ):
        super().__init__(store, clock)
        self.catalog = catalog or load_reward_catalog()

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def get_game_data(self) -> GameData:
        raw = self.store.load(self.key, None)
        if raw is None:
            return GameData()
        try:
            return GameData.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored game data unreadable, using defaults: {e}")
            return GameData()

    def _save(self, data: GameData) -> bool:
        return self._persist(data.model_dump(mode="json"))

    def _apply_level_ups(self, data: GameData):
        rules = self.catalog.leveling
        while data.exp >= data.level * rules.exp_per_level:
            data.exp -= data.level * rules.exp_per_level
            data.level += 1
            data.points += rules.level_up_bonus
            logger.info(f"Level up to {data.level} (+{rules.level_up_bonus} points)")

    def exp_to_next_level(self) -> int:
        data = self.get_game_data()
        return data.level * self.catalog.leveling.exp_per_level - data.exp

    # -------------------------------------------------------------------------
    # Points and experience
    # -------------------------------------------------------------------------

    def add_points(self, points: int) -> GameData:
        """Add (or, with a negative amount, spend) points. No floor is applied."""
        with self.store.transaction():
            data = self.get_game_data()
            data.points += points
            self._save(data)
            return data

    def add_exp(self, exp: int) -> GameData:
        """Grant experience and roll any excess over into level-ups."""
        if exp < 0:
            raise ValueError(f"Experience grants must be non-negative, got {exp}")
        with self.store.transaction():
            data = self.get_game_data()
            data.exp += exp
            self._apply_level_ups(data)
            self._save(data)
            return data

    def update_game_data(self, patch: Mapping[str, Any] | BaseModel) -> GameData:
        """Merge patch into the snapshot, then re-check level-ups."""
        with self.store.transaction():
            current = self.get_game_data()
            data = GameData.model_validate({**current.model_dump(), **as_patch(patch)})
            self._apply_level_ups(data)
            self._save(data)
            return data

    # -------------------------------------------------------------------------
    # Badges, logins, quests
    # -------------------------------------------------------------------------

    def unlock_badge(self, badge_id: str) -> GameData:
        """Add a badge once; only the first unlock pays the badge bonus."""
        with self.store.transaction():
            data = self.get_game_data()
            if badge_id in data.badges:
                return data
            data.badges.append(badge_id)
            data.points += self.catalog.leveling.badge_bonus
            self._save(data)
            logger.info(f"Badge unlocked: {badge_id}")
            return data

    def has_badge(self, badge_id: str) -> bool:
        return badge_id in self.get_game_data().badges

    def claim_daily_login(self) -> bool:
        """Pay the daily login reward at most once per calendar day."""
        today = date_key(self._today())
        reward = self.catalog.reward("daily_login")
        with self.store.transaction():
            data = self.get_game_data()
            if data.last_login_date == today:
                return False
            data.last_login_date = today
            data.points += reward.points
            data.exp += reward.exp
            self._apply_level_ups(data)
            self._save(data)
            return True

    def claim_quest(self, quest_id: str, period_key: str) -> bool:
        """
        Pay a quest reward once per period.

        Args:
            quest_id: Quest from the catalog
            period_key: Day or ISO-week key the claim belongs to

        Returns:
            True if the reward was paid, False if already claimed

        Raises:
            ValueError: If the quest is not in the catalog
        """
        quest = self.catalog.quest(quest_id)
        if quest is None:
            raise ValueError(f"Unknown quest: {quest_id}")

        token = f"{quest_id}@{period_key}"
        with self.store.transaction():
            data = self.get_game_data()
            if token in data.claimed_quests:
                return False
            data.claimed_quests.append(token)
            data.points += quest.reward
            data.exp += quest.reward // 2
            self._apply_level_ups(data)
            self._save(data)
            return True

    # -------------------------------------------------------------------------
    # Shop and characters
    # -------------------------------------------------------------------------

    def purchase_item(self, item_id: str) -> GameData:
        """
        Buy a shop item with points.

        Raises:
            ValueError: If the item is not in the catalog
            InsufficientPointsError: If the balance does not cover the cost
        """
        item = self.catalog.item(item_id)
        if item is None:
            raise ValueError(f"Unknown shop item: {item_id}")

        with self.store.transaction():
            data = self.get_game_data()
            if data.points < item.cost:
                raise InsufficientPointsError(item_id, item.cost, data.points)
            data.points -= item.cost
            data.items.append(item_id)
            self._save(data)
            logger.info(f"Purchased {item_id} for {item.cost} points")
            return data

    def available_characters(self) -> list[CharacterDefinition]:
        level = self.get_game_data().level
        return [c for c in self.catalog.characters if c.required_level <= level]

    def select_character(self, character_id: str) -> GameData:
        """Switch companion character; locked characters are refused."""
        character = self.catalog.character(character_id)
        if character is None:
            raise ValueError(f"Unknown character: {character_id}")

        with self.store.transaction():
            data = self.get_game_data()
            if data.level < character.required_level:
                raise ValueError(
                    f"Character {character_id} unlocks at level {character.required_level}, "
                    f"current level is {data.level}"
                )
            data.character = character_id
            self._save(data)
            return data
