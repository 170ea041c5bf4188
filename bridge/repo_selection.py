"""Current repository target chosen by the repo picker."""

from __future__ import annotations

import logging

from bridge.types import EMPTY_REPO, RepoTarget

logger = logging.getLogger(__name__)


class RepoSelection:
    """Holds exactly one RepoTarget.

    Runs never hold a reference to this object: callers take ``snapshot()``
    when a run starts, so later ``select()`` calls only affect later runs.
    """

    def __init__(self, initial: RepoTarget | None = None):
        self._current = initial or EMPTY_REPO

    def snapshot(self) -> RepoTarget:
        return self._current

    def select(self, target: RepoTarget) -> RepoTarget:
        logger.debug("Repo selection changed: %s -> %s", self._current, target)
        self._current = target
        return target

    def clear(self) -> None:
        self._current = EMPTY_REPO
