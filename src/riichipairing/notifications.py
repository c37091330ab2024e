"""Round start notifications.

Sending a notification must never hold up or undo a round transition, so
dispatch runs on a worker thread and failures are only logged.
"""

# Riichi Pairing
# Copyright (C) 2025  Riichi Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from riichipairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class RoundNotification:
    """A round of a tournament has been paired and started."""

    tournament_id: str
    round_number: int


Dispatcher = Callable[[RoundNotification], None]


class Notifier:
    """Base notifier. Does nothing."""

    def notify(self, notification: RoundNotification) -> None:
        logger.debug(
            f"No notifier configured for tournament {notification.tournament_id} "
            f"round {notification.round_number}"
        )

    def shutdown(self, wait: bool = True) -> None:
        pass


class BackgroundNotifier(Notifier):
    """Runs a dispatcher callback on a thread pool, fire and forget.

    Args:
        dispatch: Delivers one notification (email, push, ...)
        max_workers: Size of the worker pool
    """

    def __init__(self, dispatch: Dispatcher, max_workers: int = 2):
        self.dispatch = dispatch
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="riichipairing-notify"
        )

    def notify(self, notification: RoundNotification) -> Optional[Future]:
        """Queue a notification and return without waiting for delivery."""
        try:
            future = self._executor.submit(self.dispatch, notification)
        except RuntimeError as e:
            # executor already shut down
            logger.error(f"Could not queue notification {notification}: {e}")
            return None
        future.add_done_callback(
            lambda done: self._log_failure(notification, done)
        )
        return future

    @staticmethod
    def _log_failure(notification: RoundNotification, future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error(
                f"Failed to send round {notification.round_number} notification "
                f"for tournament {notification.tournament_id}: {error}",
                exc_info=error,
            )
        else:
            logger.debug(f"Sent notification {notification}")

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting notifications, optionally waiting for queued ones."""
        self._executor.shutdown(wait=wait)
