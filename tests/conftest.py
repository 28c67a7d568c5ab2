import os

# Settings are cached on first import; point everything at SQLite before that
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BOOKING_NOTIFICATIONS_ENABLED", "false")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

import uuid
from collections import Counter
from datetime import date, time
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import sessionmaker

from salonbook.config.database import build_engine
from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import NotificationError, PersistenceError
from salonbook.models import Base, Business, Service, Staff, WorkingHours
from salonbook.schemas.records import (
    AppointmentGroupInsertResult,
    AppointmentRecord,
    CustomerRecord,
    PaymentRecord,
    ServiceRecord,
    StaffRecord,
    WorkingHoursRecord,
)

MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 18)


class FakeStore:
    """In-memory stand-in for BookingStore that counts every call"""

    def __init__(self, business_id):
        self.business_id = business_id
        self.working_hours = []
        self.services = {}
        self.staff = []
        self.customers = {}
        self.appointments = []
        self.calls = Counter()
        self.fail_on = set()

    @property
    def total_calls(self):
        return sum(self.calls.values())

    def _call(self, name):
        self.calls[name] += 1
        if name in self.fail_on:
            raise PersistenceError(f"{name} failed")

    # setup helpers
    def add_working_hours(self, day_of_week, start="09:00", end="13:00", is_closed=False):
        self.working_hours.append(WorkingHoursRecord(
            business_id=self.business_id,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            is_closed=is_closed,
        ))

    def add_service(self, name, price, duration_minutes, is_active=True):
        service = ServiceRecord(
            id=uuid.uuid4(),
            name=name,
            price=Decimal(str(price)),
            duration_minutes=duration_minutes,
            is_active=is_active,
        )
        self.services[service.id] = service
        return service

    def add_staff(self, name, is_active=True):
        member = StaffRecord(id=uuid.uuid4(), name=name, is_active=is_active)
        self.staff.append(member)
        return member

    def add_customer(self, first_name="Ayse", last_name="Yilmaz", phone="5551234567"):
        customer = CustomerRecord(id=uuid.uuid4(), first_name=first_name, last_name=last_name, phone=phone)
        self.customers[customer.id] = customer
        return customer

    def add_appointment(self, start, end, staff_id=None, status="scheduled", appointment_date=MONDAY):
        service = next(iter(self.services.values()), None) or self.add_service("Cut", 100, 30)
        record = AppointmentRecord(
            id=uuid.uuid4(),
            business_id=self.business_id,
            appointment_group_id=uuid.uuid4(),
            customer_id=uuid.uuid4(),
            service_id=service.id,
            staff_id=staff_id,
            appointment_date=appointment_date,
            start_time=start,
            end_time=end,
            status=status,
            total_price=service.price,
            service=service,
        )
        self.appointments.append(record)
        return record

    # store interface
    def get_working_hours(self, ctx, staff_id=None):
        self._call("get_working_hours")
        return list(self.working_hours)

    def get_appointments(self, ctx, appointment_filter=None):
        self._call("get_appointments")
        rows = self.appointments
        if appointment_filter:
            if appointment_filter.staff_id:
                rows = [r for r in rows if r.staff_id == appointment_filter.staff_id]
            if appointment_filter.appointment_date:
                rows = [r for r in rows if r.appointment_date == appointment_filter.appointment_date]
            if appointment_filter.status_in:
                rows = [r for r in rows if r.status in appointment_filter.status_in]
            if appointment_filter.appointment_group_id:
                rows = [r for r in rows if r.appointment_group_id == appointment_filter.appointment_group_id]
        return sorted(rows, key=lambda r: (r.appointment_date, r.start_time))

    def get_services(self, ctx, service_ids):
        self._call("get_services")
        return [self.services[i] for i in service_ids if i in self.services]

    def get_active_staff(self, ctx):
        self._call("get_active_staff")
        return [member for member in self.staff if member.is_active]

    def get_customer(self, ctx, customer_id):
        self._call("get_customer")
        return self.customers.get(customer_id)

    def insert_customer(self, ctx, fields):
        self._call("insert_customer")
        customer = CustomerRecord(id=uuid.uuid4(), **fields.model_dump(include={"first_name", "last_name", "phone", "email"}))
        self.customers[customer.id] = customer
        return customer.id

    def insert_appointment_group(self, ctx, rows, new_customer=None):
        self._call("insert_appointment_group")
        if new_customer:
            self.customers[new_customer.id] = CustomerRecord(
                **new_customer.model_dump(include={"id", "first_name", "last_name", "phone", "email"})
            )
        records = self._records(rows)
        self.appointments.extend(records)
        return AppointmentGroupInsertResult(
            group_id=rows[0].appointment_group_id,
            inserted_ids=[record.id for record in records],
        )

    def replace_appointment_group(self, ctx, group_id, rows):
        self._call("replace_appointment_group")
        old = [r for r in self.appointments if r.appointment_group_id == group_id]
        payments = [p for r in old for p in r.payments]
        records = self._records(rows)
        records[0] = records[0].model_copy(update={
            "payments": [p.model_copy(update={"appointment_id": records[0].id}) for p in payments]
        })
        self.appointments = [r for r in self.appointments if r.appointment_group_id != group_id] + records
        return AppointmentGroupInsertResult(group_id=group_id, inserted_ids=[record.id for record in records])

    def _records(self, rows):
        staff_by_id = {member.id: member for member in self.staff}
        return [
            AppointmentRecord(
                id=uuid.uuid4(),
                **row.model_dump(),
                customer=self.customers.get(row.customer_id),
                service=self.services.get(row.service_id),
                staff=staff_by_id.get(row.staff_id),
            )
            for row in rows
        ]

    def update_appointment_status(self, ctx, appointment_ids, new_status):
        self._call("update_appointment_status")
        ids = set(appointment_ids)
        self.appointments = [
            r.model_copy(update={"status": new_status}) if r.id in ids else r
            for r in self.appointments
        ]

    def insert_payment(self, ctx, payment):
        self._call("insert_payment")
        return self._attach_payment(payment)

    def replace_payments(self, ctx, appointment_ids, payment):
        self._call("replace_payments")
        ids = set(appointment_ids)
        self.appointments = [
            r.model_copy(update={"payments": []}) if r.id in ids else r
            for r in self.appointments
        ]
        return self._attach_payment(payment)

    def _attach_payment(self, payment):
        record = PaymentRecord(id=uuid.uuid4(), **payment.model_dump())
        self.appointments = [
            r.model_copy(update={"payments": r.payments + [record]}) if r.id == payment.appointment_id else r
            for r in self.appointments
        ]
        return record.id


class FakeNotifier:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def notify_business_of_new_booking(self, ctx, group_id):
        self._send("business", group_id)

    def notify_customer_confirmation(self, ctx, group_id):
        self._send("customer", group_id)

    def _send(self, kind, group_id):
        self.sent.append((kind, group_id))
        if self.fail:
            raise NotificationError(f"{kind} notification failed")


@pytest.fixture
def ctx():
    return BusinessContext(business_id=uuid.uuid4())


@pytest.fixture
def store(ctx):
    return FakeStore(ctx.business_id)


@pytest.fixture
def notifier():
    return FakeNotifier()


# ----------------------------------------------------------------------
# SQLite-backed fixtures
# ----------------------------------------------------------------------

@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def salon(db_session):
    """A business open 09:00-13:00 Monday to Saturday, closed on Sunday"""
    business = Business(id=uuid.uuid4(), name="Studio Lila", phone_number="+905550000000",
                        notification_phone="+905551111111")
    db_session.add(business)
    db_session.flush()

    cut = Service(id=uuid.uuid4(), business_id=business.id, name="Haircut", price=Decimal("100"), duration_minutes=30)
    color = Service(id=uuid.uuid4(), business_id=business.id, name="Coloring", price=Decimal("150"), duration_minutes=45)
    retired = Service(id=uuid.uuid4(), business_id=business.id, name="Perm", price=Decimal("80"),
                      duration_minutes=60, is_active=False)
    elif_ = Staff(id=uuid.uuid4(), business_id=business.id, name="Elif")
    db_session.add_all([cut, color, retired, elif_])

    for day in range(7):
        db_session.add(WorkingHours(
            business_id=business.id,
            day_of_week=day,
            start_time=time(9, 0),
            end_time=time(13, 0),
            is_closed=day == 0,
        ))
    db_session.commit()

    return SimpleNamespace(
        business_id=business.id,
        ctx=BusinessContext(business_id=business.id),
        cut_id=cut.id,
        color_id=color.id,
        retired_id=retired.id,
        staff_id=elif_.id,
    )
