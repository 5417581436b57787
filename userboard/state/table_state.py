"""
Table state for the user dashboard.

A TableState is the single source of truth for one browser session: the
working set of users plus filter, pagination, selection and edit state. It
round-trips through plain JSON-safe dicts so it can live in a memory
``dcc.Store`` and be rebuilt at the start of every callback.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, List, Optional, Set


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str
    role: str

    def with_fields(self, name: str, email: str, role: str) -> "UserRecord":
        """Return a copy with the three editable fields replaced."""
        return replace(self, name=name, email=email, role=role)

    def editable_fields(self) -> Dict[str, str]:
        return {'name': self.name, 'email': self.email, 'role': self.role}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=int(data['id']),
            name=str(data.get('name', '')),
            email=str(data.get('email', '')),
            role=str(data.get('role', '')),
        )


@dataclass
class PendingConfirmation:
    action: str                           # 'delete_selected', 'delete_one' or 'begin_edit'
    message: str                          # prompt shown to the user
    target_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["PendingConfirmation"]:
        if not data:
            return None
        target_id = data.get('target_id')
        return cls(
            action=data['action'],
            message=data.get('message', ''),
            target_id=int(target_id) if target_id is not None else None,
        )


@dataclass
class TableState:
    users: List[UserRecord] = field(default_factory=list)
    selected_ids: Set[int] = field(default_factory=set)
    current_page: int = 1
    name_filter: str = ""
    email_filter: str = ""
    role_filters: Set[str] = field(default_factory=set)
    editing_id: Optional[int] = None
    draft: Optional[Dict[str, str]] = None
    pending: Optional[PendingConfirmation] = None
    loaded: bool = False

    def find_user(self, user_id: int) -> Optional[UserRecord]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def user_ids(self) -> Set[int]:
        return {user.id for user in self.users}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict (sets become sorted lists)."""
        return {
            'users': [user.to_dict() for user in self.users],
            'selected_ids': sorted(self.selected_ids),
            'current_page': self.current_page,
            'name_filter': self.name_filter,
            'email_filter': self.email_filter,
            'role_filters': sorted(self.role_filters),
            'editing_id': self.editing_id,
            'draft': dict(self.draft) if self.draft is not None else None,
            'pending': self.pending.to_dict() if self.pending is not None else None,
            'loaded': self.loaded,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TableState":
        """Rebuild a state from ``to_dict`` output; ``None`` gives the default state."""
        if not data:
            return cls()

        editing_id = data.get('editing_id')
        draft = data.get('draft')
        return cls(
            users=[UserRecord.from_dict(item) for item in data.get('users') or []],
            selected_ids={int(user_id) for user_id in data.get('selected_ids') or []},
            current_page=int(data.get('current_page') or 1),
            name_filter=data.get('name_filter') or "",
            email_filter=data.get('email_filter') or "",
            role_filters={str(role).lower() for role in data.get('role_filters') or []},
            editing_id=int(editing_id) if editing_id is not None else None,
            draft={k: str(v) for k, v in draft.items()} if draft is not None else None,
            pending=PendingConfirmation.from_dict(data.get('pending')),
            loaded=bool(data.get('loaded', False)),
        )
