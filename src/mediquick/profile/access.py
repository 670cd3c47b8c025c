"""Role checks shared by every command that acts on behalf of a user."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from mediquick.profile.profile import Profile, Role
from mediquick.shared.errors import Unauthorized


def find_profile(user_id: str) -> Profile | None:
    try:
        return current_domain.repository_for(Profile).get(user_id)
    except ObjectNotFoundError:
        return None


def require_role(user_id: str, *roles: Role) -> Profile:
    """Return the requester's profile, or raise ``Unauthorized`` if their role is not one of ``roles``."""
    profile = find_profile(user_id)
    allowed = {role.value for role in roles}
    if profile is None or profile.role not in allowed:
        raise Unauthorized({"requester": [f"User {user_id} must be one of: {', '.join(sorted(allowed))}"]})
    return profile


def require_admin(user_id: str) -> Profile:
    return require_role(user_id, Role.ADMIN)


def require_approved_salesperson(user_id: str) -> Profile:
    profile = find_profile(user_id)
    if profile is None or not profile.is_approved_salesperson:
        raise Unauthorized({"requester": [f"User {user_id} is not an approved salesperson"]})
    return profile
