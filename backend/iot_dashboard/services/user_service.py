"""
User Service
============

CRUD for the ``users`` collection.

The only rule of its own: ``houseSize`` is always derived from
``personsInHouse`` here, on create and whenever an update changes the number
of persons. Clients cannot set it directly, so stored value and displayed
value can never disagree.
"""

from iot_dashboard.models import UserCreate, UserUpdate
from iot_dashboard.services.base_service import CrudService
from iot_dashboard.utils.validation import house_size_for


class UserService(CrudService):
    collection_name = "users"
    resource_name = "user"
    create_model = UserCreate
    update_model = UserUpdate

    def prepare_create(self, data: dict) -> dict:
        data["houseSize"] = house_size_for(data["personsInHouse"])
        return data

    def prepare_update(self, changes: dict) -> dict:
        if "personsInHouse" in changes:
            changes["houseSize"] = house_size_for(changes["personsInHouse"])
        return changes
