"""
Projects API Filters

Query parameters accepted by ``GET /api/projects``:
- ?status=PENDING|IN_PROGRESS|COMPLETED
- ?minBudget=<n>  projects whose budget_max >= n
- ?maxBudget=<n>  projects whose budget_min <= n

The two budget filters together select every project whose budget range
overlaps [minBudget, maxBudget].
"""

from django_filters import rest_framework as filters

from ..models import Project


class ProjectFilterSet(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Project.Status.choices)
    minBudget = filters.NumberFilter(field_name='budget_max', lookup_expr='gte')
    maxBudget = filters.NumberFilter(field_name='budget_min', lookup_expr='lte')

    class Meta:
        model = Project
        fields = ['status', 'minBudget', 'maxBudget']
