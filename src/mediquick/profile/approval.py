"""Admin approval of salespersons and institutions: commands and handlers.

Approval is what creates these profiles; both start with a zero balance.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from mediquick.domain import mediquick
from mediquick.profile.access import require_admin
from mediquick.profile.profile import Profile, Role
from mediquick.profile.registration import ensure_no_profile
from mediquick.shared.concurrency import exclusive
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


@mediquick.command(part_of="Profile")
class ApproveSalesperson:
    admin_id = Identifier(required=True)
    user_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    contact_number = String(max_length=50)
    bank_details = String(max_length=255)
    address = String(max_length=500)
    age = Integer(min_value=0)
    cnic = String(max_length=50)


@mediquick.command(part_of="Profile")
class ApproveInstitution:
    admin_id = Identifier(required=True)
    user_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    contact_number = String(max_length=50)
    bank_details = String(max_length=255)
    address = String(max_length=500)
    manager_id = Identifier()


@mediquick.command_handler(part_of=Profile)
class ApprovalHandler:
    @exclusive
    @handle(ApproveSalesperson)
    def approve_salesperson(self, command):
        require_admin(command.admin_id)
        ensure_no_profile(command.user_id)

        profile = Profile.create(
            command.user_id,
            Role.SALESPERSON,
            approved=True,
            name=command.name,
            contact_number=command.contact_number,
            bank_details=command.bank_details,
            address=command.address,
            age=command.age,
            cnic=command.cnic,
        )
        current_domain.repository_for(Profile).add(profile)
        logger.info("salesperson_approved", user_id=command.user_id, admin_id=command.admin_id)
        return str(profile.user_id)

    @exclusive
    @handle(ApproveInstitution)
    def approve_institution(self, command):
        require_admin(command.admin_id)
        ensure_no_profile(command.user_id)

        profile = Profile.create(
            command.user_id,
            Role.INSTITUTION,
            approved=True,
            name=command.name,
            contact_number=command.contact_number,
            bank_details=command.bank_details,
            address=command.address,
            manager_id=command.manager_id,
        )
        current_domain.repository_for(Profile).add(profile)
        logger.info("institution_approved", user_id=command.user_id, admin_id=command.admin_id)
        return str(profile.user_id)
