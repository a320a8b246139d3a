# studytrack/fields.py
import datetime as dt

from django.utils import timezone
from rest_framework import serializers


class AwareDateTimeField(serializers.DateTimeField):
    """Read-side datetime field; always outputs ISO in UTC (Z), naive values assumed UTC."""
    def to_representation(self, value):
        if value is None:
            return None
        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt.timezone.utc)
        return super().to_representation(value.astimezone(dt.timezone.utc))


class BooleanMapField(serializers.DictField):
    """
    JSON object of caller-defined string keys to real booleans.
    Only the structure is checked; "true", 1 and friends are rejected rather than coerced.
    """
    default_error_messages = {
        "not_a_boolean": "Value for card '{card}' must be true or false.",
    }

    def to_internal_value(self, data):
        data = super().to_internal_value(data)
        for card, value in data.items():
            if not isinstance(value, bool):
                self.fail("not_a_boolean", card=card)
        return data
