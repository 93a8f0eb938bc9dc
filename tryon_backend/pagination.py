from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """Page/limit pagination with the {page, limit, total, pages} envelope."""
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_paginated_response(self, data):
        limit = self.get_page_size(self.request)
        total = self.page.paginator.count
        return Response({
            'success': True,
            'data': data,
            'pagination': {
                'page': self.page.number,
                'limit': limit,
                'total': total,
                'pages': self.page.paginator.num_pages if total else 0,
            },
        })


class LogPagination(StandardPagination):
    page_size = 50
