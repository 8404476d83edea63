"""Audit trail helpers used by the API views."""

import json

from django.contrib.contenttypes.models import ContentType
from django.core.serializers.json import DjangoJSONEncoder
from django.forms.models import model_to_dict

from .models import Activity

DESCRIPTION_LIMIT = Activity._meta.get_field('description').max_length


def snapshot(instance) -> str:
    """JSON copy of ``instance`` plus its line items when it has any."""

    data = {
        'model': instance._meta.label_lower,
        'pk': instance.pk,
        'fields': model_to_dict(instance),
    }
    items = getattr(instance, 'items', None)
    if items is not None:
        data['items'] = [model_to_dict(item) for item in items.all()]
    return json.dumps(data, cls=DjangoJSONEncoder)


def log_activity(user, action_type, instance, description=None):
    """Write an :class:`Activity` row for ``instance``.

    Deleted records keep a snapshot in ``object_repr`` so the audit log still
    shows what was removed.
    """
    if description is None:
        description = f"{instance._meta.verbose_name.capitalize()} {instance} was {action_type}."

    Activity.objects.create(
        user=user,
        action_type=action_type,
        description=description[:DESCRIPTION_LIMIT],
        content_type=ContentType.objects.get_for_model(instance),
        object_id=instance.pk,
        object_repr=snapshot(instance) if action_type == 'deleted' else '',
    )
