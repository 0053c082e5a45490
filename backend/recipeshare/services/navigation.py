"""List/detail pane state machine for the following view."""

from collections.abc import Callable

from recipeshare.exceptions import InvalidTransition
from recipeshare.logging import get_logger
from recipeshare.models import NavigationState, Pane, Relation
from recipeshare.services.follow import FollowController

logger = get_logger('services.navigation')


class NavigationStateMachine:
    """
    States are ``List`` and ``Detail(relation)``.

    select: List or Detail -> Detail(relation), replacing any active relation
    back: Detail -> List
    unfollow: Detail -> List, cancelling the active relation
    """

    def __init__(self, follow: FollowController):
        self.follow = follow
        self._state = NavigationState()
        self._listeners: list[Callable[[NavigationState], None]] = []

    @property
    def state(self) -> NavigationState:
        return self._state

    def add_listener(self, listener: Callable[[NavigationState], None]) -> None:
        self._listeners.append(listener)

    def _transition(self, state: NavigationState) -> NavigationState:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return state

    def select(self, relation: Relation) -> NavigationState:
        logger.debug("Select relation %s", relation.id)
        return self._transition(NavigationState(pane=Pane.DETAIL, active_relation=relation))

    def back(self) -> NavigationState:
        if self._state.pane != Pane.DETAIL:
            raise InvalidTransition("back is only valid from the detail pane")
        return self._transition(NavigationState())

    async def unfollow(self) -> NavigationState:
        """Return to the list and cancel the relation that was active."""
        if self._state.pane != Pane.DETAIL:
            raise InvalidTransition("unfollow is only valid from the detail pane")
        relation = self._state.active_relation
        state = self._transition(NavigationState())
        await self.follow.cancel(relation.id)
        return state
