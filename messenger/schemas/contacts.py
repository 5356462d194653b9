from typing import List
from messenger.schemas.base import CamelModel
from messenger.schemas.users import UserSummary


class ContactAddRequest(CamelModel):
    contact_id: str


class ContactList(CamelModel):
    contacts: List[UserSummary]


class ContactEnvelope(CamelModel):
    contact: UserSummary
