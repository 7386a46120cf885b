"""Session management: startup probe, login and logout.

State machine: unknown -> probe -> authenticated(user) | anonymous.
Logout always lands in anonymous and wipes every piece of per-user state, so
a different user logging in next never sees the previous user's tasks.
"""

import logging
from typing import Optional

from tasksync.api.client import ApiClient
from tasksync.api.errors import ApiError, TaskSyncError
from tasksync.engine.loader import CollectionLoader
from tasksync.engine.notifications import NotificationStaging
from tasksync.engine.store import StateStore
from tasksync.models.constants import MSG_INVALID_CREDENTIALS, MSG_LOGIN_FAILED, MSG_WELCOME
from tasksync.models.state import SessionStatus
from tasksync.models.user import User, user_from_payload

logger = logging.getLogger(__name__)


class SessionManager:
    """Establishes and tears down the authenticated identity."""

    def __init__(
        self,
        api: ApiClient,
        store: StateStore,
        loader: CollectionLoader,
        notifications: NotificationStaging,
    ):
        self.api = api
        self.store = store
        self.loader = loader
        self.notifications = notifications

    def _fetch_user(self) -> Optional[User]:
        return user_from_payload(self.api.current_user())

    def probe(self) -> Optional[User]:
        """Ask the server who is logged in.

        Never raises: any failure means "not authenticated", so the caller
        renders a login view rather than an error screen.
        """
        try:
            user = self._fetch_user()
        except TaskSyncError as e:
            logger.info(f"Session probe failed, treating as anonymous: {type(e).__name__}: {e}")
            user = None

        if user is None:
            self.store.update(session_status=SessionStatus.ANONYMOUS.value, user=None)
            return None

        self._become(user)
        logger.info(f"Session restored for {user.display_name}")
        self.loader.load_tasks()
        return user

    def login(self, username: str, password: str) -> bool:
        """Log in, then re-probe /auth/me for the canonical user object.

        Returns:
            True if the session is now authenticated
        """
        if self.store.state.is_authenticated:
            logger.warning("Login requested while already authenticated; ignoring")
            return False

        self.store.update(auth_error=None)
        try:
            self.api.login(username, password)
            user = self._fetch_user()
        except ApiError as e:
            message = MSG_INVALID_CREDENTIALS if e.status == 401 else (e.message or MSG_LOGIN_FAILED)
            logger.info(f"Login failed for {username!r}: {message}")
            self.store.update(auth_error=message)
            return False
        except TaskSyncError as e:
            logger.info(f"Login failed for {username!r}: {type(e).__name__}: {e}")
            self.store.update(auth_error=e.message or MSG_LOGIN_FAILED)
            return False

        if user is None:
            logger.warning("Login succeeded but /auth/me returned no user")
            self.store.update(auth_error=MSG_LOGIN_FAILED, session_status=SessionStatus.ANONYMOUS.value)
            return False

        self._become(user)
        logger.info(f"Logged in as {user.display_name}")
        self.notifications.flash(MSG_WELCOME)
        self.loader.load_tasks()
        return True

    def logout(self) -> None:
        """Log out; local state is reset even if the request fails."""
        try:
            self.api.logout()
        except TaskSyncError as e:
            logger.debug(f"Logout request failed (ignored): {type(e).__name__}: {e}")
        finally:
            self.store.reset_session()
            logger.info("Logged out; session state cleared")

    def _become(self, user: User) -> None:
        self.store.update(
            session_status=SessionStatus.AUTHENTICATED.value,
            user=user,
            auth_error=None,
        )
