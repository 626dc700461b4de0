"""Import all models so Base.metadata sees every table."""
from rental_service.infrastructure.db.models.contact import ContactModel
from rental_service.infrastructure.db.models.message import MessageModel
from rental_service.infrastructure.db.models.property import PropertyModel
from rental_service.infrastructure.db.models.user import UserModel

__all__ = [
    "ContactModel",
    "MessageModel",
    "PropertyModel",
    "UserModel",
]
