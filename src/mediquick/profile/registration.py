"""Role selection and admin bootstrap: commands and handlers."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from mediquick.domain import mediquick
from mediquick.profile.access import find_profile
from mediquick.profile.profile import SELF_SELECTABLE_ROLES, Profile, Role
from mediquick.shared.concurrency import exclusive
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


def ensure_no_profile(user_id: str) -> None:
    if find_profile(user_id) is not None:
        raise ValidationError({"user_id": [f"User {user_id} already has a role"]})


@mediquick.command(part_of="Profile")
class SelectRole:
    """A signed-in user picks the customer or doctor role."""

    user_id = Identifier(required=True)
    role = String(required=True, max_length=20)
    name = String(max_length=255)
    contact_number = String(max_length=50)
    address = String(max_length=500)
    age = Integer(min_value=0)
    specialty = String(max_length=255)


@mediquick.command(part_of="Profile")
class GrantAdmin:
    """Operator-only bootstrap of an administrator profile."""

    user_id = Identifier(required=True)
    name = String(max_length=255)


@mediquick.command_handler(part_of=Profile)
class RegistrationHandler:
    @exclusive
    @handle(SelectRole)
    def select_role(self, command):
        try:
            role = Role(command.role)
        except ValueError:
            raise ValidationError({"role": [f"Unknown role {command.role}"]})
        if role not in SELF_SELECTABLE_ROLES:
            raise ValidationError({"role": [f"The {role.value} role is granted by an administrator"]})
        ensure_no_profile(command.user_id)

        profile = Profile.create(
            command.user_id,
            role,
            name=command.name,
            contact_number=command.contact_number,
            address=command.address,
            age=command.age,
            specialty=command.specialty if role == Role.DOCTOR else None,
        )
        current_domain.repository_for(Profile).add(profile)
        logger.info("role_selected", user_id=command.user_id, role=role.value)
        return str(profile.user_id)

    @exclusive
    @handle(GrantAdmin)
    def grant_admin(self, command):
        ensure_no_profile(command.user_id)
        profile = Profile.create(command.user_id, Role.ADMIN, name=command.name)
        current_domain.repository_for(Profile).add(profile)
        logger.info("admin_granted", user_id=command.user_id)
        return str(profile.user_id)
