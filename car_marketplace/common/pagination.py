from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class PageLimitPagination(PageNumberPagination):
    """
    ``?page=`` / ``?limit=`` pagination, limit capped at 50.
    """
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 50

    def get_paginated_response(self, data):
        return Response({
            "count": len(data),
            "total": self.page.paginator.count,
            "next": self.get_next_link(),
            "previous": self.get_previous_link(),
            "results": data,
        })

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "required": ["count", "total", "results"],
            "properties": {
                "count": {"type": "integer", "example": 10},
                "total": {"type": "integer", "example": 123},
                "next": {"type": "string", "nullable": True, "format": "uri"},
                "previous": {"type": "string", "nullable": True, "format": "uri"},
                "results": schema,
            },
        }
