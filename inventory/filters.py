"""django-filter FilterSet for ledger queries."""

from datetime import timedelta

from common.choices import MovementType
from django.utils.dateparse import parse_date
from django_filters import rest_framework as filters

from .models import InventoryMovement


class MovementFilterSet(filters.FilterSet):
    product_id = filters.NumberFilter(field_name="product_id")
    type = filters.ChoiceFilter(field_name="movement_type", choices=MovementType.choices)
    actor_id = filters.NumberFilter(field_name="actor_id")
    # Accept both YYYY-MM-DD and full ISO-8601 timestamps
    start_date = filters.DateTimeFilter(field_name="created_at", lookup_expr="gte")
    end_date = filters.DateTimeFilter(field_name="created_at", method="filter_end_date")

    class Meta:
        model = InventoryMovement
        fields = ["product_id", "type", "actor_id", "start_date", "end_date"]

    def filter_end_date(self, queryset, name, value):
        # A bare date covers the whole day
        if parse_date(str(self.data.get("end_date", "")).strip()) is not None:
            return queryset.filter(**{f"{name}__lt": value + timedelta(days=1)})
        return queryset.filter(**{f"{name}__lte": value})
