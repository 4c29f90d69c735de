"""ProfileStore - the learner's settings record."""

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from wonbyte.schemas import UserProfile

from .base import Ledger, as_patch
from .store import StorageKey

logger = logging.getLogger(__name__)


class ProfileStore(Ledger):
    """The learner profile, created with defaults on first read."""

    key = StorageKey.USER_PROFILE

    def get_profile(self) -> UserProfile:
        """Stored profile, or defaults stamped with the current time."""
        raw = self.store.load(self.key, None)
        if raw is not None:
            try:
                return UserProfile.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Stored profile unreadable, using defaults: {e}")
        return UserProfile(created_date=self._now())

    def update_profile(self, patch: Mapping[str, Any] | BaseModel) -> UserProfile:
        """Merge patch into the profile and save it."""
        with self.store.transaction():
            current = self.get_profile()
            profile = UserProfile.model_validate({**current.model_dump(), **as_patch(patch)})
            self._persist(profile.model_dump(mode="json"))
            return profile

    def toggle_interest(self, interest: str) -> UserProfile:
        """Add the interest if missing, otherwise remove it."""
        with self.store.transaction():
            interests = list(self.get_profile().interests)
            if interest in interests:
                interests.remove(interest)
            else:
                interests.append(interest)
            return self.update_profile({"interests": interests})
