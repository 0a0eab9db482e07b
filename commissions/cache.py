"""
Tag-based invalidation on top of Django's cache.

Every tag has a version counter, and entries are stored under a key that
embeds the current version of each of their tags. Flushing a tag bumps its
version, so older entries are no longer addressed and expire on their own
TTL. Counters only move through `add` and `incr`, which the shared backends
apply atomically.
"""
import logging
import time

from django.core.cache import cache as default_cache

logger = logging.getLogger(__name__)

TAG_VERSION_PREFIX = 'cache-tag-version:'


def _initial_version():
    # Starts from the clock so a counter lost to eviction never reuses old keys.
    return int(time.time() * 1000)


class TaggedCache:

    def __init__(self, backend=None):
        self.backend = backend or default_cache

    def _version_key(self, tag):
        return f"{TAG_VERSION_PREFIX}{tag}"

    def _tag_versions(self, tags):
        version_keys = [self._version_key(tag) for tag in tags]
        versions = self.backend.get_many(version_keys)
        for version_key in version_keys:
            if version_key not in versions:
                self.backend.add(version_key, _initial_version(), None)
                versions[version_key] = self.backend.get(version_key)
        return [versions[version_key] for version_key in version_keys]

    def _tagged_key(self, tags, key):
        tags = sorted(tags)
        versions = self._tag_versions(tags)
        stamp = ','.join(f"{tag}={version}" for tag, version in zip(tags, versions))
        return f"{key}|{stamp}"

    def get(self, tags, key, default=None):
        return self.backend.get(self._tagged_key(tags, key), default)

    def put(self, tags, key, value, ttl):
        self.backend.set(self._tagged_key(tags, key), value, ttl)

    def remember(self, tags, key, ttl, callback):
        """Return the cached value for key, computing and storing it on a miss."""
        tagged_key = self._tagged_key(tags, key)
        sentinel = object()
        value = self.backend.get(tagged_key, sentinel)
        if value is not sentinel:
            return value
        value = callback()
        self.backend.set(tagged_key, value, ttl)
        return value

    def flush(self, *tags):
        for tag in tags:
            version_key = self._version_key(tag)
            try:
                version = self.backend.incr(version_key)
            except ValueError:
                # No counter yet, so nothing was cached under this tag.
                self.backend.add(version_key, _initial_version(), None)
                version = self.backend.get(version_key)
            logger.debug("Flushed cache tag %s (version %s)", tag, version)


tagged_cache = TaggedCache()
