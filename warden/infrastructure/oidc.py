"""OpenID Connect client for the external identity provider.

Authorization code flow with PKCE. Provider metadata (the discovery document)
and the signing keys are fetched lazily and cached for a fixed TTL, then
refreshed on the next request after they go stale. Clients are kept per
hostname because the callback URL is built from the host the browser used.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import secrets
import urllib.parse
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
import structlog
from jose import jwt
from jose.exceptions import JOSEError

from warden.config import Settings

logger = structlog.get_logger(__name__)


class OIDCError(Exception):
    """Raised when discovery, code exchange or id token verification fails."""


def generate_pkce_pair() -> tuple[str, str]:
    """Generate a PKCE ``code_verifier`` and its S256 ``code_challenge``."""
    code_verifier = secrets.token_urlsafe(32)
    code_challenge = (
        base64.urlsafe_b64encode(hashlib.sha256(code_verifier.encode()).digest())
        .decode()
        .rstrip("=")
    )
    return code_verifier, code_challenge


@dataclass(frozen=True)
class ProviderMetadata:
    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    jwks_uri: str
    signing_algorithms: tuple[str, ...] = ("RS256",)

    @classmethod
    def from_discovery(cls, document: dict[str, Any]) -> "ProviderMetadata":
        try:
            return cls(
                issuer=document["issuer"],
                authorization_endpoint=document["authorization_endpoint"],
                token_endpoint=document["token_endpoint"],
                jwks_uri=document["jwks_uri"],
                signing_algorithms=tuple(document.get("id_token_signing_alg_values_supported") or ("RS256",)),
            )
        except KeyError as e:
            raise OIDCError(f"Discovery document missing {e}") from e


@dataclass
class TokenSet:
    access_token: str
    claims: dict[str, Any]
    refresh_token: Optional[str] = None


@dataclass
class _CacheEntry:
    value: Any = None
    fetched_at: Optional[datetime] = None


class DiscoveryCache:
    """Caches the provider's discovery document and JWKS for ``ttl``."""

    def __init__(
        self,
        issuer_url: str,
        ttl: timedelta,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.issuer_url = issuer_url.rstrip("/")
        self.ttl = ttl
        self._transport = transport
        self._timeout = timeout
        self._metadata = _CacheEntry()
        self._jwks = _CacheEntry()
        self._lock = asyncio.Lock()

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    def _is_fresh(self, entry: _CacheEntry) -> bool:
        if entry.value is None or entry.fetched_at is None:
            return False
        return datetime.now(tz=timezone.utc) - entry.fetched_at < self.ttl

    async def _fetch_json(self, url: str) -> dict[str, Any]:
        try:
            async with self.http_client() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OIDCError(f"Failed to fetch {url}: {e}") from e

    async def get_metadata(self) -> ProviderMetadata:
        if self._is_fresh(self._metadata):
            return self._metadata.value

        async with self._lock:
            if self._is_fresh(self._metadata):
                return self._metadata.value
            document = await self._fetch_json(f"{self.issuer_url}/.well-known/openid-configuration")
            self._metadata = _CacheEntry(ProviderMetadata.from_discovery(document), datetime.now(tz=timezone.utc))
            logger.info("OIDC discovery refreshed", issuer=self.issuer_url)
            return self._metadata.value

    async def get_jwks(self, force_refresh: bool = False) -> dict[str, Any]:
        if not force_refresh and self._is_fresh(self._jwks):
            return self._jwks.value

        metadata = await self.get_metadata()
        async with self._lock:
            if not force_refresh and self._is_fresh(self._jwks):
                return self._jwks.value
            jwks = await self._fetch_json(metadata.jwks_uri)
            if not isinstance(jwks, dict) or "keys" not in jwks:
                raise OIDCError("JWKS response has no keys")
            self._jwks = _CacheEntry(jwks, datetime.now(tz=timezone.utc))
            logger.info("OIDC signing keys refreshed", key_count=len(jwks["keys"]))
            return jwks


@dataclass
class OIDCClient:
    """Relying-party client bound to one public hostname."""

    hostname: str
    cache: DiscoveryCache
    client_id: str
    client_secret: str = ""
    scopes: str = "openid email profile offline_access"
    scheme: str = "https"
    extra_auth_params: dict[str, str] = field(default_factory=lambda: {"prompt": "login consent"})

    @property
    def callback_url(self) -> str:
        return f"{self.scheme}://{self.hostname}/api/callback"

    async def authorization_url(self, state: str, nonce: str, code_challenge: str) -> str:
        metadata = await self.cache.get_metadata()
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": self.scopes,
            "redirect_uri": self.callback_url,
            "state": state,
            "nonce": nonce,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
            **self.extra_auth_params,
        }
        return f"{metadata.authorization_endpoint}?{urllib.parse.urlencode(params)}"

    async def exchange_code(self, code: str, code_verifier: str, nonce: str) -> TokenSet:
        """Trade an authorization code for tokens and verify the id token."""
        metadata = await self.cache.get_metadata()
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "code": code,
            "redirect_uri": self.callback_url,
            "code_verifier": code_verifier,
        }
        if self.client_secret:
            data["client_secret"] = self.client_secret

        try:
            async with self.cache.http_client() as client:
                response = await client.post(metadata.token_endpoint, data=data)
        except httpx.HTTPError as e:
            raise OIDCError(f"Token exchange failed: {e}") from e

        if response.status_code != 200:
            try:
                detail = response.json().get("error_description") or response.json().get("error")
            except ValueError:
                detail = response.text
            raise OIDCError(f"Token exchange failed: {detail or response.status_code}")

        tokens = response.json()
        if "id_token" not in tokens or "access_token" not in tokens:
            raise OIDCError("Token response missing id_token or access_token")

        claims = await self.verify_id_token(tokens["id_token"], tokens["access_token"], nonce)
        return TokenSet(
            access_token=tokens["access_token"],
            claims=claims,
            refresh_token=tokens.get("refresh_token"),
        )

    async def verify_id_token(self, id_token: str, access_token: Optional[str], nonce: str) -> dict[str, Any]:
        metadata = await self.cache.get_metadata()
        try:
            claims = self._decode(id_token, await self.cache.get_jwks(), metadata, access_token)
        except JOSEError:
            # Keys may have rotated since they were cached
            try:
                claims = self._decode(id_token, await self.cache.get_jwks(force_refresh=True), metadata, access_token)
            except JOSEError as e:
                raise OIDCError(f"Invalid id token: {e}") from e

        if claims.get("nonce") != nonce:
            raise OIDCError("Invalid id token: nonce mismatch")
        if not claims.get("sub") or not claims.get("email") or not claims.get("exp"):
            raise OIDCError("Invalid id token: sub, email and exp are required")
        return claims

    def _decode(self, id_token: str, jwks: dict, metadata: ProviderMetadata, access_token: Optional[str]) -> dict:
        return jwt.decode(
            id_token,
            jwks,
            algorithms=list(metadata.signing_algorithms),
            audience=self.client_id,
            issuer=metadata.issuer,
            access_token=access_token,
        )


class OIDCRegistry:
    """Hostname → client map, built lazily. All clients share one discovery cache."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.cache = DiscoveryCache(
            settings.ISSUER_URL,
            ttl=timedelta(seconds=settings.OIDC_DISCOVERY_TTL_SECONDS),
            transport=transport,
            timeout=settings.OIDC_HTTP_TIMEOUT_SECONDS,
        )
        self._clients: dict[str, OIDCClient] = {}
        self._lock = asyncio.Lock()

    async def get(self, hostname: str) -> OIDCClient:
        client = self._clients.get(hostname)
        if client is not None:
            return client

        async with self._lock:
            client = self._clients.get(hostname)
            if client is None:
                client = OIDCClient(
                    hostname=hostname,
                    cache=self.cache,
                    client_id=self.settings.OIDC_CLIENT_ID,
                    client_secret=self.settings.OIDC_CLIENT_SECRET,
                    scopes=self.settings.OIDC_SCOPES,
                )
                self._clients[hostname] = client
                logger.info("OIDC client registered", hostname=hostname)
            return client
