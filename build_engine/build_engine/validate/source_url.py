"""Validator for the reachability of the default git source.

The check is opt-in: it only runs when the build carries the
``verify.repository`` annotation set to ``"true"``.  Builds that reference
a clone secret are skipped because an anonymous probe cannot tell a
private repository from a missing one.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from build_engine.models.build import Build, BuildReason
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.capabilities import RepositoryProbe

logger = logging.getLogger(__name__)

_PROBE_SCHEMES = frozenset({"http", "https"})


class HttpRepositoryProbe:
    """Probe a repository through the git smart-HTTP discovery endpoint.

    Parameters
    ----------
    timeout:
        Seconds to wait for the remote before treating it as unreachable.
    client:
        Optional pre-configured ``httpx.AsyncClient``; when ``None`` a
        short-lived client is created per probe.
    """

    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._timeout = timeout
        self._client = client

    async def is_reachable(self, url: str) -> bool:
        discovery_url = f"{url.rstrip('/')}/info/refs"
        params = {"service": "git-upload-pack"}
        try:
            if self._client is not None:
                response = await self._client.get(discovery_url, params=params, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                    response = await client.get(discovery_url, params=params, follow_redirects=True)
        except httpx.RequestError as exc:
            logger.info("Repository probe for %s failed: %s", url, exc)
            return False
        return response.status_code == httpx.codes.OK


class SourceURLValidator(BaseValidator):
    def __init__(self, probe: RepositoryProbe) -> None:
        self._probe = probe

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.SOURCE_URL

    async def validate(self, build: Build) -> ValidationFailure | None:
        source = build.spec.source
        if not build.verify_repository or source is None or source.is_empty:
            return None
        if source.clone_secret:
            logger.debug("Skipping repository probe for %s: clone secret referenced", build.metadata.name)
            return None

        parsed = urlparse(source.url)
        if parsed.scheme not in _PROBE_SCHEMES or not parsed.netloc:
            return ValidationFailure(
                reason=BuildReason.REMOTE_REPOSITORY_UNREACHABLE,
                message="invalid source url",
            )

        if not await self._probe.is_reachable(source.url):
            return ValidationFailure(
                reason=BuildReason.REMOTE_REPOSITORY_UNREACHABLE,
                message="remote repository unreachable",
            )
        return None
