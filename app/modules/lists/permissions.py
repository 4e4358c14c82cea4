"""Who may see and change a list. Pure functions, no I/O."""

from typing import Any, Optional

from app.modules.lists.schemas import Visibility


def _visibility(list_: Any) -> Visibility:
    return Visibility(list_.visibility)


def is_owner(user: Optional[Any], list_: Any) -> bool:
    return user is not None and user.id == list_.owner_id


def can_edit(user: Optional[Any], list_: Any) -> bool:
    return is_owner(user, list_)


def can_add_to(user: Optional[Any], list_: Any) -> bool:
    if user is None:
        return False
    return is_owner(user, list_) or _visibility(list_) == Visibility.COMMUNITY


def can_view(user: Optional[Any], list_: Any) -> bool:
    if _visibility(list_) in (Visibility.PUBLIC, Visibility.COMMUNITY):
        return True
    return is_owner(user, list_)


def can_change_membership(user: Optional[Any], list_: Any, membership: Any) -> bool:
    """Owners change any membership; on community lists contributors change their own."""
    if user is None:
        return False
    if is_owner(user, list_):
        return True
    return _visibility(list_) == Visibility.COMMUNITY and membership.added_by == user.id
