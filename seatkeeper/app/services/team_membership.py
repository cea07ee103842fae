from typing import Optional
from uuid import UUID

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.entities import ChangeAction, Profile, TeamRole


async def ensure_team_member(
    uow: UnitOfWork, tenant_id: UUID, group_id: UUID, email: str, role: TeamRole
) -> Profile:
    """Put the person with this email on the team, creating their profile if needed."""
    profile = await uow.profiles.get_by_email(email)

    if profile is None:
        profile = await uow.profiles.create(
            Profile(email=email, role=role, group_id=group_id)
        )
        action = ChangeAction.insert
    elif profile.group_id != group_id:
        profile.group_id = group_id
        profile.role = role
        profile = await uow.profiles.update(profile)
        action = ChangeAction.update
    else:
        return profile

    uow.record_change(ChangeEvent("profiles", action, tenant_id, str(profile.id)))
    return profile


async def ensure_team_owner(
    uow: UnitOfWork, user_id: UUID, email: Optional[str]
) -> Optional[Profile]:
    """
    Give a subscriber an admin profile heading their own team.

    The owner's team id is their user id. Nothing is created without an email,
    or when the email already belongs to someone else's profile.
    """
    profile = await uow.profiles.get_by_id(user_id)

    if profile is None:
        if not email or await uow.profiles.get_by_email(email) is not None:
            return None
        profile = await uow.profiles.create(
            Profile(id=user_id, email=email, role=TeamRole.admin, group_id=user_id)
        )
        action = ChangeAction.insert
    elif profile.group_id is None:
        profile.group_id = user_id
        profile.role = TeamRole.admin
        profile = await uow.profiles.update(profile)
        action = ChangeAction.update
    else:
        return profile

    uow.record_change(ChangeEvent("profiles", action, user_id, str(profile.id)))
    return profile
