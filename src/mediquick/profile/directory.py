"""Profile lookups for pickers: approved institutions to donate to, doctors to request checkups from."""

from protean.utils.globals import current_domain

from mediquick.profile.profile import Profile, Role


def approved_institutions() -> list[Profile]:
    profiles = (
        current_domain.repository_for(Profile)
        ._dao.query.filter(role=Role.INSTITUTION.value, approved=True)
        .limit(None)
        .all()
        .items
    )
    return sorted(profiles, key=lambda p: (p.name or "").lower())


def doctors() -> list[Profile]:
    profiles = current_domain.repository_for(Profile)._dao.query.filter(role=Role.DOCTOR.value).limit(None).all().items
    return sorted(profiles, key=lambda p: (p.name or "").lower())
