# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Mail client — email delivery through the notification service.
Fire-and-forget: delivery failures are logged, never raised.
"""

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics.prometheus import EMAILS_SENT

logger = get_logger(__name__)


class MailClient:
    """Sends templated emails via notification-service."""

    def __init__(
        self,
        base_url: str | None = None,
        reviewer_email: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = settings.NOTIFICATION_SERVICE_URL if base_url is None else base_url
        self._reviewer = settings.REVIEWER_EMAIL if reviewer_email is None else reviewer_email
        self._timeout = settings.NOTIFICATION_TIMEOUT if timeout is None else timeout

    async def send(self, template: str, recipient: str, subject: str, body: str) -> None:
        """Send one email. Failures are logged but never raised."""
        if not self._base_url:
            logger.info("[MOCK EMAIL] To: %s | Subject: %s | Body: %s", recipient, subject, body)
            EMAILS_SENT.labels(template=template).inc()
            return
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    f"{self._base_url}/api/v1/notify",
                    json={
                        "channel": "email",
                        "recipient": recipient,
                        "message": f"{subject}\n\n{body}",
                    },
                )
            EMAILS_SENT.labels(template=template).inc()
            logger.info(
                "Email sent: template=%s, recipient=%s, status=%d",
                template,
                recipient,
                resp.status_code,
            )
        except Exception as exc:
            logger.warning("Email delivery failed: template=%s, error=%s", template, exc)

    async def send_congregation_created(
        self, email: str, username: str, cong_name: str, cong_number: str
    ) -> None:
        await self.send(
            "congregation_created",
            email,
            "Your congregation account is ready",
            f"Hello {username}, the congregation {cong_name} ({cong_number}) "
            "has been created and you have been added as its administrator.",
        )

    async def send_congregation_request(
        self, cong_name: str, cong_number: str, username: str
    ) -> None:
        if not self._reviewer:
            logger.warning(
                "REVIEWER_EMAIL not set; congregation request %s (%s) from %s not forwarded",
                cong_name,
                cong_number,
                username,
            )
            return
        await self.send(
            "congregation_request",
            self._reviewer,
            "New congregation request",
            f"{username} requested the congregation {cong_name} ({cong_number}).",
        )
