"""Audit log endpoints."""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from ..serializers import ActivitySerializer
from .utils import filter_by_params


class ActivityViewSet(viewsets.ReadOnlyModelViewSet):
    """The signed-in user's own activity, newest first."""

    serializer_class = ActivitySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        queryset = self.request.user.activities.select_related('content_type').order_by('-timestamp', '-id')
        return filter_by_params(queryset, self.request.query_params, {
            'date': 'timestamp__date',
            'action_type': 'action_type',
            'model': 'content_type__model',
        })
