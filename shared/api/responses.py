"""Success envelope helpers."""

from __future__ import annotations

from typing import Any

from rest_framework import status as http_status  # type: ignore
from rest_framework.response import Response  # type: ignore


def success_response(
    data: Any = None,
    message: str = "",
    status: int = http_status.HTTP_200_OK,
    headers: dict | None = None,
) -> Response:
    payload: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    return Response(payload, status=status, headers=headers)


class EnvelopeMixin:
    """Wrap bare 2xx payloads of a view into ``{success, message, data}``.

    Responses that already carry ``success`` (paginated lists, explicit
    ``success_response`` calls, errors) are left untouched.
    """

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore
        if (
            200 <= response.status_code < 300
            and response.status_code != http_status.HTTP_204_NO_CONTENT
            and not (isinstance(response.data, dict) and "success" in response.data)
        ):
            response.data = {"success": True, "message": "", "data": response.data}
        return super().finalize_response(request, response, *args, **kwargs)
