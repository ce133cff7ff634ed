# backend/bh_core/compliance/api/views.py
from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from bh_core.common.permissions import get_actor
from bh_core.compliance.api.serializers import NoticeSerializer
from bh_core.compliance.notices import notices_for_actor
from bh_core.compliance.periods import reporting_timezone

AS_OF_PARAMETER = OpenApiParameter(
    name="as_of",
    type=OpenApiTypes.DATE,
    location=OpenApiParameter.QUERY,
    required=False,
    description="Evaluate as of this calendar date (reporting timezone). Defaults to now.",
)


def evaluation_instant(request) -> datetime:
    """
    ``?as_of=YYYY-MM-DD`` pins the evaluation to noon of that date in the reporting zone.
    """
    raw = request.query_params.get("as_of")
    if not raw:
        return timezone.now()
    try:
        day = datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError({"as_of": ["Expected YYYY-MM-DD."]}) from None
    return datetime.combine(day, time(12, 0), tzinfo=reporting_timezone())


class NoticeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Notices"], parameters=[AS_OF_PARAMETER], responses={200: NoticeSerializer(many=True)})
    def get(self, request):
        notices = notices_for_actor(get_actor(request), evaluation_instant(request))
        return Response(NoticeSerializer(notices, many=True).data, status=status.HTTP_200_OK)
