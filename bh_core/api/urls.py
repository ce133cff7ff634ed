# backend/bh_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from bh_core.audit.api.views import AuditEventViewSet
from bh_core.clinical_records.api.views import ClinicalRecordViewSet
from bh_core.compliance.api.views import NoticeView
from bh_core.documents.api.views import DocumentViewSet
from bh_core.facilities.api.views import FacilityViewSet
from bh_core.iam.api.me import MeView
from bh_core.obligations.api.views import ObligationRecordViewSet

router = DefaultRouter()

router.register(r"facilities", FacilityViewSet, basename="facilities")
router.register(r"obligations", ObligationRecordViewSet, basename="obligations")
router.register(r"documents", DocumentViewSet, basename="documents")
router.register(r"clinical-records", ClinicalRecordViewSet, basename="clinical-records")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    # Auth + /me
    path("auth/token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),

    path("notices/", NoticeView.as_view(), name="notices"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
