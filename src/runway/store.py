"""Disk-backed storage for generated guides.

Uses :mod:`diskcache` to keep :class:`~runway.models.StoredGuide` records
on the filesystem under short random slugs, so a guide generated once can
be shown again later with ``runway show <slug>``. Entries optionally expire
after :attr:`~runway.models.StoreConfig.ttl_seconds`.

Records are stored as JSON-compatible dicts (``model_dump(mode="json")``)
rather than pickled models, so a store survives model changes that keep
the serialised shape.
"""

from __future__ import annotations

import logging
import secrets
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import diskcache

from runway.exceptions import ConfigError, GuideNotFoundError
from runway.models import Endpoint, NormalizedSpec, StoreConfig, StoredGuide

logger = logging.getLogger(__name__)

SLUG_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SLUG_LENGTH = 8
_MAX_SLUG_ATTEMPTS = 5


def generate_slug() -> str:
    """Return a random 8-character slug drawn from ``0-9a-z``."""
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(SLUG_LENGTH))


def extract_domain(url: Optional[str]) -> Optional[str]:
    """Return the host name of *url*, or ``None`` if it has none.

    Example::

        >>> extract_domain("https://petstore3.swagger.io/api/v3/openapi.json")
        'petstore3.swagger.io'
        >>> extract_domain("./openapi.json") is None
        True
    """
    if not url:
        return None
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


class GuideStore:
    """Slug-addressed store for generated guides.

    Args:
        store_dir: Root directory for the store. A ``guides/`` subdirectory
            is created inside it.
        config: Store configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        from runway.store import GuideStore
        from runway.models import StoreConfig

        store = GuideStore("/tmp/runway", StoreConfig())
        guide = store.save(spec, endpoint, spec_url="https://example.com/openapi.json")
        again = store.load(guide.slug)
        store.close()
    """

    def __init__(self, store_dir: str | Path, config: StoreConfig) -> None:
        self._config = config
        self._store_dir = Path(store_dir)
        self._cache: Optional[diskcache.Cache] = None
        if config.enabled:
            self._cache = diskcache.Cache(str(self._store_dir / "guides"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def save(
        self,
        spec: NormalizedSpec,
        endpoint: Endpoint,
        spec_url: Optional[str] = None,
    ) -> StoredGuide:
        """Store *spec* with *endpoint* selected under a fresh slug.

        Raises:
            ConfigError: If the store is disabled, or no unused slug could
                be found.
        """
        if self._cache is None:
            raise ConfigError("Guide store is disabled (store.enabled is false)")

        for _ in range(_MAX_SLUG_ATTEMPTS):
            guide = StoredGuide(
                slug=generate_slug(),
                api_name=spec.title,
                spec_url=spec_url,
                api_domain=extract_domain(spec_url),
                spec=spec,
                endpoint=endpoint.label,
                created_at=datetime.now(timezone.utc),
            )
            # add() only writes when the key is absent
            if self._cache.add(
                guide.slug,
                guide.model_dump(mode="json"),
                expire=self._config.ttl_seconds,
            ):
                logger.debug("Stored guide %s for %r", guide.slug, spec.title)
                return guide
            logger.debug("Slug collision on %s, retrying", guide.slug)

        raise ConfigError(f"Could not allocate a unique slug after {_MAX_SLUG_ATTEMPTS} attempts")

    def load(self, slug: str) -> StoredGuide:
        """Return the guide stored under *slug* and count the view.

        Raises:
            GuideNotFoundError: If there is no such guide (or it expired).
        """
        if self._cache is None:
            raise GuideNotFoundError(f"Guide '{slug}' not found (store is disabled)")

        with self._cache.transact():
            data, expire_time = self._cache.get(slug, expire_time=True)
            if data is None:
                raise GuideNotFoundError(f"Guide '{slug}' not found")

            guide = StoredGuide.model_validate(data)
            guide.view_count += 1

            expire = None
            if expire_time is not None:
                expire = max(expire_time - time.time(), 0)
            self._cache.set(slug, guide.model_dump(mode="json"), expire=expire)

        return guide

    def delete(self, slug: str) -> bool:
        """Remove a guide. Returns ``True`` if it existed."""
        if self._cache is None:
            return False
        return bool(self._cache.delete(slug))

    def list_slugs(self) -> list[str]:
        """All stored slugs, sorted."""
        if self._cache is None:
            return []
        return sorted(str(key) for key in self._cache.iterkeys())

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
