"""Response envelopes shared by every API view."""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.utils.urls import replace_query_param


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    payload = {"success": True, "message": str(message)}
    if data is not None:
        payload["data"] = data
    return Response(payload, status=status_code)


def created_response(data=None, message="Resource created successfully"):
    return success_response(data, message, status.HTTP_201_CREATED)


def _page_url(request, page_number):
    return replace_query_param(request.build_absolute_uri(), "page", page_number)


def paginated_response(request, page, data, message="Data retrieved successfully"):
    """Envelope for a repositories.Page whose items were already serialized into `data`."""
    last_page = page.last_page
    return Response({
        "success": True,
        "message": str(message),
        "data": data,
        "meta": {
            "current_page": page.page,
            "from": page.first_item,
            "last_page": last_page,
            "per_page": page.per_page,
            "to": page.last_item,
            "total": page.total,
        },
        "links": {
            "first": _page_url(request, 1),
            "last": _page_url(request, last_page),
            "prev": _page_url(request, page.page - 1) if page.page > 1 else None,
            "next": _page_url(request, page.page + 1) if page.page < last_page else None,
        },
    })
