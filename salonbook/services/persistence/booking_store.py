# ============================================================================
# salonbook/services/persistence/booking_store.py
# The only place scheduling code reaches the database
# ============================================================================
"""SQLAlchemy-backed persistence for availability, bookings and payments"""
import logging
import uuid
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import (
    AppointmentGroupNotFoundError,
    AvailabilityConflictError,
    PersistenceError,
)
from salonbook.models import (
    BLOCKING_STATUSES,
    Appointment,
    Business,
    Customer,
    Payment,
    Service,
    Staff,
    WorkingHours,
)
from salonbook.schemas.records import (
    AppointmentFilter,
    AppointmentGroupInsertResult,
    AppointmentInsert,
    AppointmentRecord,
    CustomerCreate,
    CustomerRecord,
    PaymentInsert,
    ServiceRecord,
    StaffRecord,
    WorkingHoursRecord,
)
from salonbook.utils.time_utils import intervals_overlap, to_minutes

logger = logging.getLogger(__name__)


class BookingStore:
    """Persistence collaborator used by the scheduling services.

    Every write commits exactly once: a group insert, a group status update or
    a payment change either lands completely or is rolled back.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_business(self, business_id: UUID) -> Optional[Business]:
        try:
            return self.db.query(Business).filter(Business.id == business_id).first()
        except SQLAlchemyError as e:
            raise self._persistence_error("load business", e)

    def get_working_hours(
            self,
            ctx: BusinessContext,
            staff_id: Optional[UUID] = None
    ) -> List[WorkingHoursRecord]:
        """Weekly rows for the business, or for one staff member when given"""
        try:
            query = self.db.query(WorkingHours).filter(WorkingHours.business_id == ctx.business_id)
            if staff_id:
                query = query.filter(WorkingHours.staff_id == staff_id)
            else:
                query = query.filter(WorkingHours.staff_id.is_(None))
            rows = query.order_by(WorkingHours.day_of_week.asc()).all()
        except SQLAlchemyError as e:
            raise self._persistence_error("load working hours", e)

        return [WorkingHoursRecord.model_validate(row) for row in rows]

    def get_appointments(
            self,
            ctx: BusinessContext,
            appointment_filter: Optional[AppointmentFilter] = None
    ) -> List[AppointmentRecord]:
        """Appointment rows joined with customer, service, staff and payments,
        ordered by start time so group representatives are stable."""
        appointment_filter = appointment_filter or AppointmentFilter()

        try:
            query = (
                self.db.query(Appointment)
                .options(
                    joinedload(Appointment.customer),
                    joinedload(Appointment.service),
                    joinedload(Appointment.staff),
                    selectinload(Appointment.payments),
                )
                .filter(Appointment.business_id == ctx.business_id)
            )

            if appointment_filter.staff_id:
                query = query.filter(Appointment.staff_id == appointment_filter.staff_id)
            if appointment_filter.appointment_date:
                query = query.filter(Appointment.appointment_date == appointment_filter.appointment_date)
            if appointment_filter.status_in:
                query = query.filter(Appointment.status.in_(appointment_filter.status_in))
            if appointment_filter.appointment_group_id:
                query = query.filter(
                    Appointment.appointment_group_id == appointment_filter.appointment_group_id
                )

            rows = query.order_by(
                Appointment.appointment_date.asc(),
                Appointment.start_time.asc(),
                Appointment.created_at.asc(),
                Appointment.id.asc(),
            ).all()
        except SQLAlchemyError as e:
            raise self._persistence_error("load appointments", e)

        return [AppointmentRecord.model_validate(row) for row in rows]

    def get_services(self, ctx: BusinessContext, service_ids: List[UUID]) -> List[ServiceRecord]:
        try:
            rows = self.db.query(Service).filter(
                Service.business_id == ctx.business_id,
                Service.id.in_(service_ids)
            ).all()
        except SQLAlchemyError as e:
            raise self._persistence_error("load services", e)

        return [ServiceRecord.model_validate(row) for row in rows]

    def get_active_staff(self, ctx: BusinessContext) -> List[StaffRecord]:
        try:
            rows = self.db.query(Staff).filter(
                Staff.business_id == ctx.business_id,
                Staff.is_active == True
            ).order_by(Staff.name.asc(), Staff.id.asc()).all()
        except SQLAlchemyError as e:
            raise self._persistence_error("load staff", e)

        return [StaffRecord.model_validate(row) for row in rows]

    def get_customer(self, ctx: BusinessContext, customer_id: UUID) -> Optional[CustomerRecord]:
        try:
            customer = self.db.query(Customer).filter(
                Customer.id == customer_id,
                Customer.business_id == ctx.business_id
            ).first()
        except SQLAlchemyError as e:
            raise self._persistence_error("load customer", e)

        return CustomerRecord.model_validate(customer) if customer else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_customer(self, ctx: BusinessContext, fields: CustomerCreate) -> UUID:
        customer = self._build_customer(ctx, fields)
        try:
            self.db.add(customer)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._persistence_error("insert customer", e)

        logger.info(f"Created customer {customer.id} for business {ctx.business_id}")
        return customer.id

    def insert_appointment_group(
            self,
            ctx: BusinessContext,
            rows: List[AppointmentInsert],
            new_customer: Optional[CustomerCreate] = None
    ) -> AppointmentGroupInsertResult:
        """Insert every row of one appointment group in a single transaction.

        When the group has a staff member, the staff row is locked first and
        the window is re-checked against that staff member's active bookings,
        so two concurrent bookings of the same slot cannot both commit.

        A `new_customer` is written in the same transaction; its id must be
        the rows' customer_id. A failed insert leaves neither behind.
        """
        group_id, first = self._check_group_rows(rows)
        if new_customer and new_customer.id != first.customer_id:
            raise ValueError("new_customer.id must match the rows' customer_id")

        try:
            if first.staff_id:
                self._lock_staff(ctx, first.staff_id)
                self._ensure_window_free(ctx, first)

            if new_customer:
                self.db.add(self._build_customer(ctx, new_customer))

            appointments = self._build_appointments(rows)
            self.db.add_all(appointments)
            self.db.commit()
        except AvailabilityConflictError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._persistence_error(f"insert appointment group {group_id}", e)

        inserted_ids = [appointment.id for appointment in appointments]
        logger.info(f"Inserted appointment group {group_id} with {len(inserted_ids)} rows")
        return AppointmentGroupInsertResult(group_id=group_id, inserted_ids=inserted_ids)

    def replace_appointment_group(
            self,
            ctx: BusinessContext,
            group_id: UUID,
            rows: List[AppointmentInsert]
    ) -> AppointmentGroupInsertResult:
        """Swap the rows of an existing group for new ones in one transaction.

        The window check ignores the group's own rows. Payments of the old
        rows move to the first new row.

        Raises:
            AppointmentGroupNotFoundError: the group has no rows
            AvailabilityConflictError: the new window overlaps another booking
            PersistenceError: the write failed (the old rows are kept)
        """
        rows_group_id, first = self._check_group_rows(rows)
        if rows_group_id != group_id:
            raise ValueError("Replacement rows must keep the group's appointment_group_id")

        try:
            old_ids = [
                appointment_id for appointment_id, in self.db.query(Appointment.id).filter(
                    Appointment.business_id == ctx.business_id,
                    Appointment.appointment_group_id == group_id
                ).all()
            ]
            if not old_ids:
                raise AppointmentGroupNotFoundError(f"Appointment {group_id} not found")

            if first.staff_id:
                self._lock_staff(ctx, first.staff_id)
                self._ensure_window_free(ctx, first, exclude_group_id=group_id)

            # Old rows leave the group first so (group, service) stays unique
            self.db.query(Appointment).filter(Appointment.id.in_(old_ids)).update(
                {Appointment.appointment_group_id: None}, synchronize_session=False
            )

            appointments = self._build_appointments(rows)
            self.db.add_all(appointments)
            self.db.flush()

            self.db.query(Payment).filter(Payment.appointment_id.in_(old_ids)).update(
                {Payment.appointment_id: appointments[0].id}, synchronize_session=False
            )
            self.db.query(Appointment).filter(Appointment.id.in_(old_ids)).delete(synchronize_session=False)
            self.db.commit()
        except (AvailabilityConflictError, AppointmentGroupNotFoundError):
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._persistence_error(f"replace appointment group {group_id}", e)

        inserted_ids = [appointment.id for appointment in appointments]
        logger.info(
            f"Replaced appointment group {group_id}: {len(old_ids)} rows -> {len(inserted_ids)} rows"
        )
        return AppointmentGroupInsertResult(group_id=group_id, inserted_ids=inserted_ids)

    def update_appointment_status(
            self,
            ctx: BusinessContext,
            appointment_ids: List[UUID],
            new_status: str
    ) -> None:
        """Set the status of every listed row, or of none of them"""
        if not appointment_ids:
            return

        try:
            updated = self.db.query(Appointment).filter(
                Appointment.business_id == ctx.business_id,
                Appointment.id.in_(appointment_ids)
            ).update({Appointment.status: new_status}, synchronize_session=False)

            if updated != len(set(appointment_ids)):
                self.db.rollback()
                raise PersistenceError(
                    f"Status update matched {updated} of {len(set(appointment_ids))} appointments"
                )

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._persistence_error("update appointment status", e)

    def insert_payment(self, ctx: BusinessContext, payment: PaymentInsert) -> UUID:
        record = Payment(id=uuid.uuid4(), **payment.model_dump())
        try:
            self._ensure_appointment_owned(ctx, payment.appointment_id)
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._persistence_error("insert payment", e)

        return record.id

    def replace_payments(
            self,
            ctx: BusinessContext,
            appointment_ids: List[UUID],
            payment: PaymentInsert
    ) -> UUID:
        """Drop the payments of a group's rows and record one new payment"""
        record = Payment(id=uuid.uuid4(), **payment.model_dump())
        try:
            self._ensure_appointment_owned(ctx, payment.appointment_id)
            self.db.query(Payment).filter(
                Payment.appointment_id.in_(appointment_ids)
            ).delete(synchronize_session=False)
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._persistence_error("replace payments", e)

        return record.id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_group_rows(rows: List[AppointmentInsert]):
        if not rows:
            raise ValueError("An appointment group needs at least one row")

        group_ids = {row.appointment_group_id for row in rows}
        if len(group_ids) != 1:
            raise ValueError("All rows must share one appointment_group_id")
        return group_ids.pop(), rows[0]

    @staticmethod
    def _build_appointments(rows: List[AppointmentInsert]) -> List[Appointment]:
        return [Appointment(id=uuid.uuid4(), **row.model_dump()) for row in rows]

    @staticmethod
    def _build_customer(ctx: BusinessContext, fields: CustomerCreate) -> Customer:
        return Customer(
            id=fields.id or uuid.uuid4(),
            business_id=ctx.business_id,
            first_name=fields.first_name,
            last_name=fields.last_name,
            phone=fields.phone,
            email=fields.email,
            notes=fields.notes,
        )

    def _lock_staff(self, ctx: BusinessContext, staff_id: UUID) -> None:
        # Serializes check-and-insert per staff member (no-op on SQLite)
        self.db.query(Staff).filter(
            Staff.id == staff_id,
            Staff.business_id == ctx.business_id
        ).with_for_update().first()

    def _ensure_window_free(
            self,
            ctx: BusinessContext,
            row: AppointmentInsert,
            exclude_group_id: Optional[UUID] = None
    ) -> None:
        existing = self.db.query(Appointment).filter(
            Appointment.business_id == ctx.business_id,
            Appointment.staff_id == row.staff_id,
            Appointment.appointment_date == row.appointment_date,
            Appointment.status.in_(BLOCKING_STATUSES),
        ).all()

        start, end = to_minutes(row.start_time), to_minutes(row.end_time)
        for appointment in existing:
            if exclude_group_id and appointment.appointment_group_id == exclude_group_id:
                continue
            if intervals_overlap(start, end, to_minutes(appointment.start_time), to_minutes(appointment.end_time)):
                logger.warning(
                    f"Slot {row.appointment_date} {row.start_time} for staff {row.staff_id} "
                    f"conflicts with appointment {appointment.id}"
                )
                raise AvailabilityConflictError(
                    "This time slot is no longer available, please choose another one"
                )

    def _ensure_appointment_owned(self, ctx: BusinessContext, appointment_id: UUID) -> None:
        owned = self.db.query(Appointment.id).filter(
            Appointment.id == appointment_id,
            Appointment.business_id == ctx.business_id
        ).first()
        if not owned:
            raise PersistenceError(f"Appointment {appointment_id} does not belong to this business")

    @staticmethod
    def _persistence_error(action: str, exc: Exception) -> PersistenceError:
        logger.error(f"Failed to {action}: {exc}")
        return PersistenceError(f"Failed to {action}")
