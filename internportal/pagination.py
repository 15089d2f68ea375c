import math
from dataclasses import dataclass, field

from django.conf import settings
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


def coerce_positive_int(value, default):
    """Parse ``value`` as an integer >= 1, falling back to ``default``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass
class Window:
    rows: list = field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    total_pages: int = 0
    limit: int = 10


def paginate(queryset, page, limit):
    """
    Slice one page out of ``queryset``.

    A page past the end yields no rows but keeps the totals, so dashboards can
    still render their pagers.
    """
    total_count = queryset.count()
    offset = (page - 1) * limit
    rows = list(queryset[offset:offset + limit]) if offset < total_count else []
    return Window(
        rows=rows,
        total_count=total_count,
        current_page=page,
        total_pages=math.ceil(total_count / limit),
        limit=limit,
    )


class WindowPagination(BasePagination):
    """page/limit pagination used by every dashboard list endpoint."""

    page_query_param = 'page'
    limit_query_param = 'limit'
    # Key in settings.PORTAL holding the default page size
    limit_setting = 'PAGE_SIZE'
    results_key = 'rows'

    def get_limit(self, request):
        default = settings.PORTAL[self.limit_setting]
        limit = coerce_positive_int(request.query_params.get(self.limit_query_param), default)
        return min(limit, settings.PORTAL['MAX_PAGE_SIZE'])

    def get_page(self, request):
        return coerce_positive_int(request.query_params.get(self.page_query_param), 1)

    def paginate_queryset(self, queryset, request, view=None):
        self.window = paginate(queryset, self.get_page(request), self.get_limit(request))
        return self.window.rows

    def get_paginated_response(self, data, **extra):
        payload = {
            'success': True,
            self.results_key: data,
            'total_count': self.window.total_count,
            'current_page': self.window.current_page,
            'total_pages': self.window.total_pages,
        }
        payload.update(extra)
        return Response(payload)


class SmallWindowPagination(WindowPagination):
    limit_setting = 'SMALL_PAGE_SIZE'
