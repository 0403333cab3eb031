"""
Core — Pagination

Page-number paginator. Clients may size pages with either ``page_size``
or ``limit``; both are capped at MAX_PAGE_SIZE.

@file core/pagination.py
"""

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class StandardPagination(PageNumberPagination):
    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = MAX_PAGE_SIZE

    def get_page_size(self, request):
        if 'limit' in request.query_params and self.page_size_query_param not in request.query_params:
            try:
                limit = int(request.query_params['limit'])
            except (TypeError, ValueError):
                return self.page_size
            if limit > 0:
                return min(limit, self.max_page_size)
        return super().get_page_size(request)

    def get_paginated_response(self, data):
        return Response({
            'count': self.page.paginator.count,
            'total_pages': self.page.paginator.num_pages,
            'page': self.page.number,
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
        })
