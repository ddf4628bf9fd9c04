# catalog/views/listing_cache.py

"""
READ-THROUGH CACHE FOR PUBLIC CATALOG LISTINGS

Rules:
- Only anonymous/customer list responses are cached; admins always hit the DB.
- Any admin write bumps a namespace version, which orphans old keys.
- Cart and order code never reads through this cache.
"""

from __future__ import annotations

import hashlib

from django.conf import settings
from django.core.cache import cache
from rest_framework.response import Response


class CachedListMixin:
    cache_namespace = "catalog"

    def is_admin_request(self) -> bool:
        user = getattr(self.request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))

    def _version_key(self) -> str:
        return f"catalog:{self.cache_namespace}:version"

    def _list_cache_key(self, request) -> str:
        version = cache.get_or_set(self._version_key(), 1, timeout=None)
        digest = hashlib.sha256(request.get_full_path().encode("utf-8")).hexdigest()
        return f"catalog:{self.cache_namespace}:v{version}:{digest}"

    def bump_cache_version(self) -> None:
        try:
            cache.incr(self._version_key())
        except ValueError:
            cache.set(self._version_key(), 2, timeout=None)

    def list(self, request, *args, **kwargs):
        timeout = int(getattr(settings, "CATALOG_CACHE_SECONDS", 0) or 0)
        if timeout <= 0 or self.is_admin_request():
            return super().list(request, *args, **kwargs)

        key = self._list_cache_key(request)
        cached = cache.get(key)
        if cached is not None:
            return Response(cached)

        response = super().list(request, *args, **kwargs)
        if response.status_code == 200:
            cache.set(key, response.data, timeout)
        return response

    def perform_create(self, serializer):
        super().perform_create(serializer)
        self.bump_cache_version()

    def perform_update(self, serializer):
        super().perform_update(serializer)
        self.bump_cache_version()

    def perform_destroy(self, instance):
        super().perform_destroy(instance)
        self.bump_cache_version()
