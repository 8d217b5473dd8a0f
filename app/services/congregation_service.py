# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Congregation lifecycle — intake requests, creation, identity
updates, backups and the pocket schedule.
Every method returns an Outcome or raises OperationError.
"""

from typing import Any, Optional

from app.core.errors import OperationError
from app.core.logging import get_logger
from app.core.outcome import Outcome, info
from app.core.validation import validate_payload
from app.metrics.prometheus import (
    BACKUPS_SAVED,
    CONGREGATION_REQUESTS,
    CONGREGATIONS_CREATED,
)
from app.models.domain import Role, utcnow
from app.repositories.interfaces import CongregationStore, IdentityStore, RequestLedger
from app.schemas.congregation import (
    BackupPayload,
    CongregationCreatePayload,
    CongregationInfoPayload,
    CongregationRequestPayload,
    SchedulePayload,
)
from app.services.access_gate import AccessGate, member_entry
from app.services.mail_client import MailClient

logger = get_logger(__name__)

BACKUP_SECTIONS: tuple[str, ...] = (
    "cong_persons",
    "cong_deleted",
    "cong_schedule",
    "cong_source_material",
    "cong_sws_pocket",
    "cong_settings",
)


def _congregation_exists() -> OperationError:
    return OperationError.coded(
        404, "CONG_EXISTS", "the congregation requested already exists"
    )


def _account_not_found() -> OperationError:
    return OperationError.coded(404, "ACCOUNT_NOT_FOUND", "user could not be found")


def _already_affiliated() -> OperationError:
    return OperationError.coded(
        400, "ALREADY_MEMBER", "user already belongs to a congregation"
    )


class CongregationService:
    """Business logic for congregation records."""

    def __init__(
        self,
        user_repo: IdentityStore,
        congregation_repo: CongregationStore,
        request_repo: RequestLedger,
        gate: AccessGate,
        mail_client: MailClient,
        auto_approve_requests: bool = False,
    ) -> None:
        self._users = user_repo
        self._congregations = congregation_repo
        self._requests = request_repo
        self._gate = gate
        self._mail = mail_client
        self.auto_approve_requests = auto_approve_requests

    # ── Intake & creation ──

    async def request_congregation(self, payload: Any) -> Outcome:
        """
        Open a congregation request for an lmmo requestor.
        With auto-approval the congregation is created on the spot.
        """
        data = validate_payload(CongregationRequestPayload, payload)
        if data.app_requestor != Role.LMMO.value:
            raise OperationError.bad_request(f"invalid input: {data.app_requestor}")

        if await self._requests.find_open_by_email(data.email) is not None:
            CONGREGATION_REQUESTS.labels(outcome="duplicate").inc()
            raise OperationError.coded(405, "REQUEST_EXIST", "user can only make one request")

        user = await self._users.find_by_email(data.email)
        if user is None:
            raise _account_not_found()
        if self.auto_approve_requests:
            if user.cong_id:
                raise _already_affiliated()
            if await self._congregations.find_by_number(data.cong_number) is not None:
                raise _congregation_exists()

        request = await self._requests.create_if_absent(
            email=data.email,
            cong_name=data.cong_name,
            cong_number=data.cong_number,
            cong_role=data.app_requestor,
        )
        if request is None:
            CONGREGATION_REQUESTS.labels(outcome="duplicate").inc()
            raise OperationError.coded(405, "REQUEST_EXIST", "user can only make one request")

        if self.auto_approve_requests:
            cong = await self._congregations.create(request.cong_name, request.cong_number)
            if cong is None:
                await self._requests.close(request.id)
                raise _congregation_exists()
            member = await self._users.claim_congregation(user.id, cong, [request.cong_role])
            if member is None:
                await self._congregations.delete(cong.id)
                await self._requests.close(request.id)
                raise _already_affiliated()
            CONGREGATION_REQUESTS.labels(outcome="approved").inc()
            await self._congregations.add_member(cong.id, member_entry(member))
            await self._requests.approve(request.id)
            CONGREGATIONS_CREATED.labels(source="request").inc()
            logger.info("Congregation auto-approved: id=%s, number=%s", cong.id, cong.cong_number)
            await self._mail.send_congregation_created(
                user.email, user.username, cong.cong_name, cong.cong_number
            )
            return info("congregation created", {"message": "OK"})

        CONGREGATION_REQUESTS.labels(outcome="pending").inc()
        await self._mail.send_congregation_request(
            request.cong_name, request.cong_number, user.username
        )
        return info(
            "congregation request sent for approval",
            {
                "message": "OK",
                "cong_name": request.cong_name,
                "cong_number": request.cong_number,
            },
        )

    async def create_congregation(self, payload: Any) -> Outcome:
        data = validate_payload(CongregationCreatePayload, payload)
        if data.app_requestor != Role.LMMO.value:
            raise OperationError.bad_request(f"invalid input: {data.app_requestor}")

        if await self._congregations.find_by_number(
            f"{data.country_code}{data.cong_number}"
        ) is not None:
            raise _congregation_exists()

        user = await self._users.find_by_email(data.email)
        if user is None:
            raise _account_not_found()
        if user.cong_id:
            raise _already_affiliated()

        cong = await self._congregations.create(
            data.cong_name, data.cong_number, data.country_code
        )
        if cong is None:
            raise _congregation_exists()

        member = await self._users.claim_congregation(
            user.id, cong, [Role.ADMIN.value, Role.LMMO.value]
        )
        if member is None:
            raise _already_affiliated()
        await self._congregations.add_member(cong.id, member_entry(member))

        CONGREGATIONS_CREATED.labels(source="admin").inc()
        logger.info("Congregation created: id=%s, number=%s", cong.id, cong.composite_number)
        return info("congregation created successfully", member.public_view())

    async def update_congregation_info(
        self, cong_id: Optional[str], email: Optional[str], payload: Any
    ) -> Outcome:
        """Persist new identity fields, then reload every member from the identity store."""
        cong = await self._gate.admit(cong_id, email)
        data = validate_payload(CongregationInfoPayload, payload)

        updated = await self._congregations.update_info(
            cong.id, data.cong_name, data.cong_number, data.country_code
        )
        members = []
        for member in updated.cong_members:
            refreshed = await self._users.refresh_congregation_details(member.user_id, updated)
            if refreshed is not None:
                members.append(member_entry(refreshed))
        await self._congregations.replace_members(cong.id, members)

        caller = await self._users.find_by_email(email)
        if caller is None:
            raise _account_not_found()
        return info("congregation information updated", caller.public_view())

    # ── Backups ──

    async def get_last_backup(self, cong_id: Optional[str], email: Optional[str]) -> Outcome:
        cong = await self._gate.admit(cong_id, email)
        if cong.last_backup:
            return info(
                "user get the latest backup info for the congregation", cong.last_backup
            )
        return info(
            "no backup has been made yet for the congregation", {"message": "NO_BACKUP"}
        )

    async def save_backup(
        self, cong_id: Optional[str], email: Optional[str], payload: Any
    ) -> Outcome:
        cong = await self._gate.admit(cong_id, email, missing_code="REQUEST_ID_INVALID")
        data = validate_payload(BackupPayload, payload)

        performer = _username_for(cong.cong_members, email) or email
        await self._congregations.save_backup(
            cong.id,
            data.model_dump(),
            {"by": performer, "date": utcnow().isoformat()},
        )
        BACKUPS_SAVED.inc()
        return info(
            "user send backup for congregation successfully", {"message": "BACKUP_SENT"}
        )

    async def retrieve_backup(self, cong_id: Optional[str], email: Optional[str]) -> Outcome:
        cong = await self._gate.admit(cong_id, email, missing_code="REQUEST_ID_INVALID")
        backup = BackupPayload.model_validate(
            {section: getattr(cong, section) for section in BACKUP_SECTIONS}
        ).model_dump(by_alias=True)
        return info("user retrieve backup for congregation successfully", backup)

    # ── Pocket schedule ──

    async def send_schedule(
        self, cong_id: Optional[str], email: Optional[str], payload: Any
    ) -> Outcome:
        cong = await self._gate.admit(cong_id, email)
        data = validate_payload(SchedulePayload, payload)
        await self._congregations.save_schedule(
            cong.id,
            data.schedules.cong_schedule,
            data.schedules.cong_source_material,
            data.cong_settings,
        )
        return info("schedule save for sws pocket application", {"message": "SCHEDULE_SENT"})

    async def get_schedule(self, cong_id: Optional[str], email: Optional[str]) -> Outcome:
        """Schedule for pocket users. The congregation must hold a settings record."""
        cong = await self._gate.admit(cong_id, email)
        first_settings = cong.cong_settings[0]
        return info(
            "user has fetched the schedule",
            {
                "cong_schedule": cong.cong_schedule,
                "cong_sourceMaterial": cong.cong_source_material,
                "class_count": first_settings.get("class_count"),
                "source_lang": first_settings.get("source_lang"),
            },
        )


def _username_for(members, email: str) -> Optional[str]:
    wanted = email.strip().lower()
    for member in members:
        if member.email and member.email.lower() == wanted:
            return member.username or None
    return None
