"""Follow request creation and cancellation."""

from recipeshare.logging import get_logger
from recipeshare.models import (
    CandidateUser,
    Notification,
    NotificationIntent,
    SessionUser,
    UserSnapshot,
)
from recipeshare.services.display import user_label
from recipeshare.services.notifications import NotificationSink
from recipeshare.services.relation_backend import RelationBackend

logger = get_logger('services.follow')


class FollowController:
    """
    Issues relation writes and reports the outcome as a notification.

    Nothing is retried and no local relation state is kept: the relation
    store picks up successful writes from the backend. Failures never raise
    to the caller.
    """

    def __init__(self, backend: RelationBackend, notifier: NotificationSink):
        self.backend = backend
        self.notifier = notifier

    async def request(self, current_user: SessionUser, target_user: CandidateUser) -> None:
        logger.debug("Follow request %s -> %s", current_user.uid, target_user.object_id)
        try:
            await self.backend.create_relation(
                current_user,
                target_user.object_id,
                UserSnapshot(
                    display_name=target_user.display_name,
                    email=target_user.email,
                    photo_url=target_user.photo_url,
                ),
            )
        except Exception as exc:
            logger.error(f"Follow request to {target_user.object_id} failed: {exc}")
            self.notifier.notify(
                Notification(
                    title="An error occurred while making your request.",
                    subtitle=str(exc),
                    intent=NotificationIntent.DANGER,
                )
            )
            return

        self.notifier.notify(
            Notification(
                title=f"A request has been sent to {user_label(target_user.display_name, target_user.email)}",
                intent=NotificationIntent.SUCCESS,
            )
        )

    async def cancel(self, relation_id: str) -> None:
        logger.debug("Cancel request %s", relation_id)
        try:
            await self.backend.delete_relation(relation_id)
        except Exception as exc:
            logger.error(f"Cancelling request {relation_id} failed: {exc}")
            self.notifier.notify(
                Notification(
                    title="An error occurred while cancelling your request.",
                    subtitle=str(exc),
                    intent=NotificationIntent.DANGER,
                )
            )
