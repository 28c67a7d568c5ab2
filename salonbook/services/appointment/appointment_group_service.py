# ============================================================================
# salonbook/services/appointment/appointment_group_service.py
# Pure business logic - no FastAPI dependencies, fully testable
# ============================================================================
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import AppointmentGroupNotFoundError
from salonbook.schemas.appointment_group import AppointmentGroup, GroupedService
from salonbook.schemas.records import AppointmentFilter, AppointmentRecord
from salonbook.utils.time_utils import format_time


class AppointmentGroupService:
    """Rebuilds customer visits from their per-service appointment rows."""

    @staticmethod
    def group_appointments(rows: List[AppointmentRecord]) -> List[AppointmentGroup]:
        """
        Cluster rows by appointment_group_id.

        The first row seen for a group supplies its status, notes, customer and
        staff; later rows only add their service, id and payments. Rows without
        a group id are treated as a group of one.
        """
        groups: Dict[UUID, AppointmentGroup] = {}

        for row in rows:
            group_id = row.appointment_group_id or row.id
            service = GroupedService(
                name=row.service.name if row.service else "",
                duration_minutes=row.service.duration_minutes if row.service else 0,
                price=row.total_price,
            )

            existing = groups.get(group_id)
            if existing:
                existing.services.append(service)
                existing.appointment_ids.append(row.id)
                existing.payments.extend(row.payments)
                existing.total_price += row.total_price
                continue

            groups[group_id] = AppointmentGroup(
                appointment_group_id=group_id,
                appointment_date=row.appointment_date,
                start_time=format_time(row.start_time),
                end_time=format_time(row.end_time),
                status=row.status,
                total_price=Decimal(row.total_price),
                notes=row.notes,
                customer=row.customer,
                staff=row.staff,
                services=[service],
                appointment_ids=[row.id],
                payments=list(row.payments),
            )

        return list(groups.values())

    @staticmethod
    def list_grouped_appointments(
            ctx: BusinessContext,
            store,
            appointment_date: Optional[date] = None,
            status: Optional[str] = None,
            staff_id: Optional[UUID] = None
    ) -> List[AppointmentGroup]:
        """Grouped appointments of a business, ordered by start time"""
        rows = store.get_appointments(
            ctx,
            AppointmentFilter(
                appointment_date=appointment_date,
                status_in=[status] if status else None,
                staff_id=staff_id,
            )
        )
        return AppointmentGroupService.group_appointments(rows)

    @staticmethod
    def get_group(ctx: BusinessContext, store, group_id: UUID) -> AppointmentGroup:
        """Load one group; raises AppointmentGroupNotFoundError when it has no rows"""
        rows = store.get_appointments(ctx, AppointmentFilter(appointment_group_id=group_id))
        groups = AppointmentGroupService.group_appointments(rows)
        if not groups:
            raise AppointmentGroupNotFoundError(f"Appointment {group_id} not found")
        return groups[0]
