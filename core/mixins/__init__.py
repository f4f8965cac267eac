"""
Core Mixins Package

Mixins riutilizzabili per le views.
"""

from .view_mixins import (
    JSONResponseMixin,
    FormInvalidMessageMixin,
    ServiceFormMixin,
    CustomPaginationMixin,
    FilterMixin,
    SearchMixin,
    BreadcrumbMixin,
)

__all__ = [
    "JSONResponseMixin",
    "FormInvalidMessageMixin",
    "ServiceFormMixin",
    "CustomPaginationMixin",
    "FilterMixin",
    "SearchMixin",
    "BreadcrumbMixin",
]
