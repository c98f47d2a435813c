"""Per-request console session.

Lifecycle: ``ConsoleSession.load`` reads the persisted token/user from the
Django session, ``verify`` checks that both are present and parse, and only
then is the session ``ready``. Views receive it as ``request.console``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.records.user import User

logger = logging.getLogger(__name__)

TOKEN_KEY = "console_token"
USER_KEY = "console_user"

ANONYMOUS = "anonymous"
READY = "ready"


@dataclass
class ConsoleSession:
    token: str | None = None
    user: User | None = None
    state: str = ANONYMOUS

    @classmethod
    def load(cls, session) -> "ConsoleSession":
        console = cls(token=session.get(TOKEN_KEY))
        raw_user = session.get(USER_KEY)
        if raw_user:
            try:
                console.user = User.from_api(raw_user)
            except (TypeError, AttributeError):
                logger.warning("Discarding unreadable console user in session")
                console.user = None
        return console.verify()

    def verify(self) -> "ConsoleSession":
        if self.token and self.user is not None:
            self.state = READY
        else:
            self.token, self.user, self.state = None, None, ANONYMOUS
        return self

    @property
    def is_authenticated(self) -> bool:
        return self.state == READY

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.user.is_admin

    @property
    def is_superadmin(self) -> bool:
        return self.is_authenticated and self.user.is_superadmin

    def start(self, session, token: str, user: User) -> None:
        session.cycle_key()
        session[TOKEN_KEY] = token
        session[USER_KEY] = user.to_session()
        self.token, self.user = token, user
        self.verify()

    def end(self, session) -> None:
        session.flush()
        self.token, self.user = None, None
        self.verify()
