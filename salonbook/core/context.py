# salonbook/core/context.py
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class BusinessContext(BaseModel):
    """The tenant every scheduling operation runs against.

    Built once per request from the authenticated or routed business id and
    passed explicitly to every service call.
    """
    model_config = ConfigDict(frozen=True)

    business_id: UUID

    def __str__(self):
        return str(self.business_id)
