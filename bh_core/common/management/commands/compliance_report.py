# backend/bh_core/common/management/commands/compliance_report.py
from __future__ import annotations

import json
from datetime import datetime, time

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from bh_core.compliance.engine import ComplianceEngine
from bh_core.compliance.periods import reporting_timezone
from bh_core.facilities.models import Facility


class Command(BaseCommand):
    help = "Print the current compliance status of every active facility."

    def add_arguments(self, parser):
        parser.add_argument("--facility", type=int, help="Only this facility id.")
        parser.add_argument("--as-of", dest="as_of", help="Evaluate as of YYYY-MM-DD (reporting timezone).")
        parser.add_argument("--json", action="store_true", help="Emit one JSON object per facility.")

    def handle(self, *args, **opts):
        now = timezone.now()
        if opts.get("as_of"):
            try:
                day = datetime.strptime(opts["as_of"], "%Y-%m-%d").date()
            except ValueError:
                raise CommandError("--as-of must be YYYY-MM-DD") from None
            now = datetime.combine(day, time(12, 0), tzinfo=reporting_timezone())

        facilities = Facility.objects.filter(is_active=True).order_by("name")
        if opts.get("facility"):
            facilities = facilities.filter(id=opts["facility"])
            if not facilities.exists():
                raise CommandError(f"No active facility with id {opts['facility']}")

        failing = 0
        for f in facilities:
            result = ComplianceEngine.get_compliance_status(facility_id=f.id, now=now)
            failing += 0 if result.in_compliance else 1

            if opts.get("json"):
                self.stdout.write(json.dumps({
                    "facility_id": f.id,
                    "facility": f.name,
                    "in_compliance": result.in_compliance,
                    "obligation_issues": result.obligation_issues,
                    "document_issues": result.document_issues,
                    "document_warnings": result.document_warnings,
                }))
                continue

            if result.in_compliance:
                self.stdout.write(self.style.SUCCESS(f"[OK]   {f.name}"))
            else:
                self.stdout.write(self.style.ERROR(f"[FAIL] {f.name}"))
                for reason in result.reasons:
                    self.stdout.write(f"         - {reason['message']}")

        if not opts.get("json"):
            self.stdout.write(f"{facilities.count() - failing} compliant, {failing} out of compliance.")
