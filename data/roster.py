"""Read-through cache of the people roster."""

import logging
from typing import List, Optional

from config.defaults import PEOPLE_COLLECTION
from models.person import Person

logger = logging.getLogger(__name__)


class RosterCache:
    """Snapshot of every person in the store.

    The snapshot is advisory: it is replaced wholesale by refresh(), never
    merged, and must be refreshed after every write or detected conflict.
    """

    def __init__(self, store):
        self.store = store
        self._people: List[Person] = []
        self._stale = True
        self.generation = 0

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def people(self) -> List[Person]:
        return list(self._people)

    def invalidate(self):
        self._stale = True

    def refresh(self) -> List[Person]:
        """Re-read all people. StoreError propagates and leaves the cache stale."""
        self._stale = True
        rows = self.store.select(PEOPLE_COLLECTION, "*", order="nombre", ascending=True)
        people = []
        for row in rows:
            try:
                people.append(Person.from_row(row))
            except ValueError as exc:
                logger.warning("Skipping unreadable person row: %s", exc)
        self._people = people
        self._stale = False
        self.generation += 1
        logger.debug("Roster refreshed: %d people (generation %d)", len(people), self.generation)
        return self.people

    def ensure_fresh(self) -> List[Person]:
        if self._stale:
            return self.refresh()
        return self.people

    def get(self, person_id: str) -> Optional[Person]:
        for person in self._people:
            if person.id == person_id:
                return person
        return None
