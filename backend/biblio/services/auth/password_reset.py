"""Password reset placeholder.

No reset-token registry exists yet, so requests are acknowledged without
revealing whether the email is known and every reset attempt is refused.
"""

from __future__ import annotations

import logging

from biblio.services._shared.base import BaseService

log = logging.getLogger(__name__)


class PasswordResetService(BaseService):
    """Accept reset requests and refuse reset attempts."""

    def request_reset(self, email: str) -> None:
        """Record a reset request. Always succeeds, known email or not."""
        with self.ro_uow() as uow:
            known = uow.users.exists_by_email(email) if email else False
        if known:
            # TODO: issue a single-use reset token and hand it to a mail sender.
            log.info("auth.password_reset.requested")
        else:
            log.info("auth.password_reset.unknown_email")

    def reset_password(self, token: str, new_password: str) -> bool:
        """:returns: Always ``False``; there are no reset tokens to accept."""
        log.warning("auth.password_reset.rejected", extra={"reason": "unsupported"})
        return False
