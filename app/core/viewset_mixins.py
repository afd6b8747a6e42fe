"""
ViewSet mixins shared by the domain apps.

- ApplicationErrorMixin: renders BaseApplicationError subclasses as JSON
- OwnerScopedMixin: restricts querysets to the requesting user's records

Usage:
    from core.viewset_mixins import ApplicationErrorMixin, OwnerScopedMixin

    class ClientViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
        queryset = Client.objects.all()
        serializer_class = ClientSerializer
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework.response import Response

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class ApplicationErrorMixin:
    """
    Translate service exceptions into HTTP responses.

    Overrides APIView.handle_exception so every action of the viewset gets
    the same mapping. Anything that is not a BaseApplicationError goes
    through DRF's normal handling.
    """

    def handle_exception(self, exc: Exception) -> Any:
        if isinstance(exc, BaseApplicationError):
            logger.warning(
                "Request rejected: %s",
                exc,
                extra={
                    "error_code": exc.error_code,
                    "view": self.__class__.__name__,
                },
            )
            return Response(exc.to_dict(), status=exc.http_status)
        return super().handle_exception(exc)


class OwnerScopedMixin:
    """
    Limit every queryset to rows owned by request.user.

    Lookups for another user's record therefore 404 exactly like a missing
    one. New rows get the requesting user as owner.
    """

    owner_field = "owner"

    def get_queryset(self) -> Any:
        queryset = super().get_queryset()
        return queryset.filter(**{self.owner_field: self.request.user})

    def perform_create(self, serializer: Any) -> None:
        serializer.save(**{self.owner_field: self.request.user})
