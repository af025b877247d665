"""
Sensor Service
==============

CRUD for the ``sensors`` collection.

``userId`` is stored as a real ObjectId so it can be matched against
``users._id``, and comes back out as a string.

STRICT REFERENCES:
-----------------
By default a sensor may point at any well-formed user id, existing or not
(deleting a user leaves its sensors behind anyway). With strict references on,
create and any update that changes ``userId`` check that the user exists
first and answer 400 otherwise.
"""

import logging
from typing import Optional

from pymongo.database import Database

from iot_dashboard.exceptions import ValidationError
from iot_dashboard.models import SensorCreate, SensorUpdate
from iot_dashboard.services.base_service import CrudService
from iot_dashboard.services.user_service import UserService
from iot_dashboard.utils.validation import to_object_id

logger = logging.getLogger(__name__)


class SensorService(CrudService):
    collection_name = "sensors"
    resource_name = "sensor"
    create_model = SensorCreate
    update_model = SensorUpdate
    timestamps = False

    def __init__(self, database: Database, users: Optional[UserService] = None):
        """
        Args:
            database: The MongoDB database holding the collections
            users: When given, user references are checked on write
        """
        super().__init__(database)
        self.users = users

    def _check_user(self, user_id: str):
        if self.users is not None and not self.users.exists(user_id):
            logger.warning(f"Rejected sensor write: user {user_id} does not exist")
            raise ValidationError(f"userId {user_id} does not reference an existing user")

    def prepare_create(self, data: dict) -> dict:
        self._check_user(data["userId"])
        data["userId"] = to_object_id(data["userId"], "user")
        return data

    def prepare_update(self, changes: dict) -> dict:
        if "userId" in changes:
            self._check_user(changes["userId"])
            changes["userId"] = to_object_id(changes["userId"], "user")
        return changes
