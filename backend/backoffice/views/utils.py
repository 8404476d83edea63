"""Utility helpers shared across API view modules."""

from decimal import Decimal

from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import Coalesce
from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response

from ..activity_logger import log_activity

ZERO = Decimal('0')


def total_of(queryset, field):
    """Sum ``field`` over ``queryset``, returning ``0`` for an empty queryset."""

    return queryset.aggregate(
        total=Coalesce(Sum(field), ZERO, output_field=DecimalField())
    )['total']


def grouped_totals(queryset, group_field, amount_field):
    """Return ``{group: {'amount': total, 'count': n}}`` for ``queryset``."""

    rows = queryset.order_by().values(group_field).annotate(
        amount=Coalesce(Sum(amount_field), ZERO, output_field=DecimalField()),
        count=Count('id'),
    )
    return {
        row[group_field]: {'amount': row['amount'], 'count': row['count']}
        for row in rows
    }


def status_counts(queryset, field='status'):
    return {row[field]: row['count'] for row in queryset.order_by().values(field).annotate(count=Count('id'))}


def get_export_format(request):
    # ``?format=`` is reserved for DRF renderer negotiation.
    return request.query_params.get('export_format', '').lower()


class ActivityLoggingMixin:
    """Record an :class:`Activity` for every create, update and delete."""

    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user)
        log_activity(self.request.user, 'created', instance)

    def perform_update(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'updated', instance)

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        instance.delete()


def filter_by_params(queryset, query_params, lookups):
    """Apply ``{param: lookup}`` filters for every non-empty query parameter."""

    return queryset.filter(**{
        lookup: query_params[param]
        for param, lookup in lookups.items()
        if query_params.get(param)
    })


def download_response(content, filename, content_type, disposition='attachment'):
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'{disposition}; filename="{filename}"'
    return response


class ReadWriteSerializerMixin:
    """Validate writes with one serializer and answer with another.

    ``write_serializer_class`` takes the request payload and runs the workflow.
    The response always carries the ``read_serializer_class`` representation.
    """

    read_serializer_class = None
    write_serializer_class = None

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return self.write_serializer_class
        return self.read_serializer_class

    def read_response(self, instance, status_code=status.HTTP_200_OK):
        serializer = self.read_serializer_class(instance, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return self.read_response(serializer.instance, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(
            self.get_object(), data=request.data, partial=kwargs.pop('partial', False)
        )
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return self.read_response(serializer.instance)
