# backend/bh_core/iam/api/me.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from bh_core.common.permissions import get_actor


class MeSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.CharField(allow_blank=True)
    role = serializers.CharField()
    bhp_id = serializers.IntegerField(allow_null=True)
    facility_id = serializers.IntegerField(allow_null=True)


class MeView(APIView):
    """Who am I acting as: role plus the BHP or facility the role is bound to."""

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Auth"], responses={200: MeSerializer})
    def get(self, request):
        actor = get_actor(request)
        data = {
            "user_id": request.user.id,
            "username": request.user.get_username(),
            "email": getattr(request.user, "email", "") or "",
            "role": str(actor.role),
            "bhp_id": actor.bhp_id,
            "facility_id": actor.facility_id,
        }
        return Response(MeSerializer(data).data, status=status.HTTP_200_OK)
