# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repositories, collaborators and services.
Upstream gateways share one httpx client created in the app lifespan.
"""

import httpx

from app.core.config import settings
from app.repositories.congregation_repository import CongregationRepository
from app.repositories.request_repository import RequestRepository
from app.repositories.user_repository import UserRepository
from app.services.access_gate import AccessGate
from app.services.code_cipher import CodeCipher
from app.services.congregation_service import CongregationService
from app.services.directory_client import DirectoryClient
from app.services.directory_service import DirectoryService
from app.services.epub_reader import EpubReader
from app.services.mail_client import MailClient
from app.services.member_service import MemberService
from app.services.pocket_service import PocketService
from app.services.source_material_client import SourceMaterialClient
from app.services.source_material_service import SourceMaterialService

# ── Singleton repository instances (in-memory stores) ──
_user_repo = UserRepository()
_congregation_repo = CongregationRepository()
_request_repo = RequestRepository()

# ── Collaborators ──
_mail_client = MailClient()
_code_cipher = CodeCipher(settings.ENCRYPTION_KEY)
_access_gate = AccessGate(_congregation_repo)

# ── Service instances (with injected dependencies) ──
_congregation_service = CongregationService(
    user_repo=_user_repo,
    congregation_repo=_congregation_repo,
    request_repo=_request_repo,
    gate=_access_gate,
    mail_client=_mail_client,
    auto_approve_requests=settings.AUTO_APPROVE_REQUESTS,
)
_member_service = MemberService(
    user_repo=_user_repo,
    congregation_repo=_congregation_repo,
    gate=_access_gate,
)
_pocket_service = PocketService(
    user_repo=_user_repo,
    congregation_repo=_congregation_repo,
    gate=_access_gate,
    cipher=_code_cipher,
)

# ── Upstream-backed services (created with the HTTP client) ──
_http_client: httpx.AsyncClient | None = None
_directory_service: DirectoryService | None = None
_source_material_service: SourceMaterialService | None = None


def init_http_client() -> None:
    global _http_client, _directory_service, _source_material_service
    timeout = settings.UPSTREAM_TIMEOUT or None
    _http_client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    _directory_service = DirectoryService(DirectoryClient(_http_client))
    _source_material_service = SourceMaterialService(
        SourceMaterialClient(_http_client, EpubReader(_http_client))
    )


async def close_http_client() -> None:
    global _http_client
    if _http_client:
        await _http_client.aclose()
        _http_client = None


# ── FastAPI dependency functions ──
def get_congregation_service() -> CongregationService:
    return _congregation_service


def get_member_service() -> MemberService:
    return _member_service


def get_pocket_service() -> PocketService:
    return _pocket_service


def get_directory_service() -> DirectoryService:
    if _directory_service is None:
        raise RuntimeError("directory service requested before init_http_client()")
    return _directory_service


def get_source_material_service() -> SourceMaterialService:
    if _source_material_service is None:
        raise RuntimeError("source material service requested before init_http_client()")
    return _source_material_service


def get_code_cipher() -> CodeCipher:
    return _code_cipher


def get_user_repo() -> UserRepository:
    return _user_repo


def get_congregation_repo() -> CongregationRepository:
    return _congregation_repo


def get_request_repo() -> RequestRepository:
    return _request_repo
