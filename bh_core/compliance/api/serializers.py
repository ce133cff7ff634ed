# backend/bh_core/compliance/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class PeriodSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    quarter = serializers.CharField()
    half = serializers.CharField()
    bi_week = serializers.IntegerField()
    bi_week_year = serializers.IntegerField()


class ObligationVerdictSerializer(serializers.Serializer):
    kind = serializers.CharField()
    satisfied = serializers.BooleanField()
    window = serializers.CharField()
    record_count = serializers.IntegerField()
    missing_shifts = serializers.ListField(child=serializers.CharField())


class ComplianceStatusSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField()
    evaluated_at = serializers.DateTimeField()
    period = PeriodSerializer()
    in_compliance = serializers.BooleanField()
    document_issues = serializers.ListField(child=serializers.IntegerField())
    document_warnings = serializers.ListField(child=serializers.IntegerField())
    obligation_issues = serializers.ListField(child=serializers.CharField())
    reasons = serializers.ListField(child=serializers.DictField())
    obligations = ObligationVerdictSerializer(many=True)


class EmployeeComplianceRowSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    status = serializers.CharField()
    issues = serializers.ListField(child=serializers.IntegerField())
    warnings = serializers.ListField(child=serializers.IntegerField())


class EmployeeComplianceSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField()
    compliant = serializers.IntegerField()
    expiring_soon = serializers.IntegerField()
    non_compliant = serializers.IntegerField()
    employees = EmployeeComplianceRowSerializer(many=True)


class NoticeSerializer(serializers.Serializer):
    code = serializers.CharField()
    severity = serializers.CharField()
    message = serializers.CharField()
    count = serializers.IntegerField()
