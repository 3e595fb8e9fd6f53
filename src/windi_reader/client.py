"""
Async client for the remote WINDI verification API.

Only document hashes leave the machine: files and buffers are hashed
locally and the API receives "sha256:<hex>" digests.

Example:
    async with WindiVerifyClient(base_url, api_key) as client:
        response = await client.verify_from_file(
            "./invoice.pdf",
            document_id="windi:doc:inv-2026-001",
            issuer_key_id="windi:key:bank-de",
        )
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from anyio import to_thread
import httpx

from .errors import WindiConfigError, WindiHttpError
from .hashing import PathLike, sha256_urn, sha256_urn_from_file


logger = logging.getLogger(__name__)

ProofLevel = Literal["L1", "L2", "L3"]

DEFAULT_TIMEOUT = 15.0
DEFAULT_PROOF_LEVEL: ProofLevel = "L2"
API_KEY_HEADER = "X-WINDI-API-KEY"


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings for the verification API."""
    base_url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """
        Load settings from WINDI_BASE_URL, WINDI_API_KEY and WINDI_TIMEOUT.

        Raises:
            WindiConfigError: If WINDI_TIMEOUT is not a number
        """
        raw_timeout = os.getenv("WINDI_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise WindiConfigError(f"WINDI_TIMEOUT must be a number, got {raw_timeout!r}")
        return cls(
            base_url=os.getenv("WINDI_BASE_URL", ""),
            api_key=os.getenv("WINDI_API_KEY", ""),
            timeout=timeout,
        )


@dataclass
class VerifyRequest:
    """Body of POST /verify."""
    document_id: str
    document_hash: str
    issuer_key_id: str
    manifest_id: Optional[str] = None
    proof_level: Optional[ProofLevel] = None

    def to_dict(self) -> dict[str, Any]:
        body = {
            "document_id": self.document_id,
            "document_hash": self.document_hash,
            "issuer_key_id": self.issuer_key_id,
            "manifest_id": self.manifest_id,
            "proof_level": self.proof_level,
        }
        return {k: v for k, v in body.items() if v is not None}


@dataclass
class VerifyResponse:
    """
    Verdict returned by the verification API.

    verdict: VALID | SUSPECT | INVALID
    integrity: INTACT | MODIFIED | UNKNOWN
    trust_level: achieved proof level (L1 | L2 | L3)
    issuer_status: TRUSTED | UNKNOWN | REVOKED, if reported
    """
    verdict: str
    integrity: str
    trust_level: str
    issuer_status: Optional[str] = None
    checks: dict[str, Any] = field(default_factory=dict)
    risk_flags: list[str] = field(default_factory=list)
    request_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VerifyResponse":
        return cls(
            verdict=str(data.get("verdict", "INVALID")),
            integrity=str(data.get("integrity", "UNKNOWN")),
            trust_level=str(data.get("trust_level", "")),
            issuer_status=data.get("issuer_status"),
            checks=dict(data.get("checks") or {}),
            risk_flags=[str(flag) for flag in data.get("risk_flags") or []],
            request_id=data.get("request_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "verdict": self.verdict,
            "integrity": self.integrity,
            "trust_level": self.trust_level,
            "issuer_status": self.issuer_status,
            "checks": dict(self.checks),
            "risk_flags": list(self.risk_flags),
            "request_id": self.request_id,
        }


class WindiVerifyClient:
    """
    Client for the WINDI verification API.

    Configuration is checked at construction: a missing base URL or API
    key raises WindiConfigError immediately.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url:
            raise WindiConfigError("base_url is required")
        if not api_key:
            raise WindiConfigError("api_key is required")

        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={API_KEY_HEADER: api_key},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "WindiVerifyClient":
        return cls(settings.base_url, settings.api_key, settings.timeout, transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "WindiVerifyClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def verify(self, request: "VerifyRequest | dict[str, Any]") -> VerifyResponse:
        """
        Verify a document by hash.

        Raises:
            WindiHttpError: On HTTP error status or network failure
        """
        body = request.to_dict() if isinstance(request, VerifyRequest) else dict(request)
        logger.debug("POST /verify for %s", body.get("document_id"))
        data = await self._post("/verify", body)
        return VerifyResponse.from_dict(data)

    async def verify_from_file(
        self,
        file_path: PathLike,
        document_id: str,
        issuer_key_id: str,
        manifest_id: Optional[str] = None,
        proof_level: ProofLevel = DEFAULT_PROOF_LEVEL,
    ) -> VerifyResponse:
        """
        Hash a local file and verify it.

        Raises:
            OSError: If the file cannot be read
            WindiHttpError: On HTTP error status or network failure
        """
        document_hash = await to_thread.run_sync(sha256_urn_from_file, file_path)
        return await self.verify(VerifyRequest(
            document_id=document_id,
            document_hash=document_hash,
            issuer_key_id=issuer_key_id,
            manifest_id=manifest_id,
            proof_level=proof_level,
        ))

    async def verify_from_bytes(
        self,
        data: bytes,
        document_id: str,
        issuer_key_id: str,
        manifest_id: Optional[str] = None,
        proof_level: ProofLevel = DEFAULT_PROOF_LEVEL,
    ) -> VerifyResponse:
        return await self.verify(VerifyRequest(
            document_id=document_id,
            document_hash=sha256_urn(data),
            issuer_key_id=issuer_key_id,
            manifest_id=manifest_id,
            proof_level=proof_level,
        ))

    async def verify_wvc(self, wvc: str, proof_level: ProofLevel = DEFAULT_PROOF_LEVEL) -> VerifyResponse:
        """Verify using a WINDI Verification Code (requires /verify/wvc on the server)."""
        data = await self._post("/verify/wvc", {"wvc": wvc, "proof_level": proof_level})
        return VerifyResponse.from_dict(data)

    async def health_check(self) -> dict[str, Any]:
        try:
            response = await self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise _normalize_http_error(exc) from exc
        return _json_body(response)

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise _normalize_http_error(exc) from exc
        return _json_body(response)


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        raise WindiHttpError(
            "WINDI response is not valid JSON",
            status=response.status_code,
            data=response.text,
            request_id=response.headers.get("x-request-id"),
        )
    if not isinstance(data, dict):
        raise WindiHttpError(
            "WINDI response is not a JSON object",
            status=response.status_code,
            data=data,
            request_id=response.headers.get("x-request-id"),
        )
    return data


def _normalize_http_error(exc: httpx.HTTPError) -> WindiHttpError:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            data: Any = response.json()
        except ValueError:
            data = response.text
        request_id = response.headers.get("x-request-id")
        if request_id is None and isinstance(data, dict):
            request_id = data.get("request_id")
        logger.warning("WINDI API returned HTTP %s (request_id=%s)", response.status_code, request_id)
        return WindiHttpError(
            f"WINDI HTTP {response.status_code}",
            status=response.status_code,
            data=data,
            request_id=request_id,
        )

    logger.warning("WINDI API request failed: %s", exc)
    return WindiHttpError(
        f"WINDI network/error: {str(exc) or type(exc).__name__}",
        status=0,
        data={"message": str(exc)},
    )
