"""
Table State Controller
Single owner of the user table state and the view derived from it

Every operation mutates the owned TableState and immediately re-derives the
view (filtered → sorted → paginated). Derivation also restores the state
invariants: the current page is clamped into range and the selection is
pruned to rows that pass the active filters.

Architecture:
┌─────────────────────────────────────────────────────────────┐
│                    TABLE STATE CONTROLLER                   │
├─────────────────────────────────────────────────────────────┤
│  State: TableState (users, filters, page, selection, edit)  │
│  ├─ load() / load_records()                                 │
│  ├─ filters: name / email / role / clear                    │
│  ├─ selection: row / select-all                             │
│  ├─ pagination: set_page                                    │
│  ├─ deletes: request → confirm → delete                     │
│  └─ editing: begin_edit → update_draft → commit_edit        │
├─────────────────────────────────────────────────────────────┤
│  derive() → TableView (read-only snapshot for rendering)    │
└─────────────────────────────────────────────────────────────┘
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from userboard.constants import CLEAR_SELECTION_ON_SINGLE_DELETE, EDITABLE_FIELDS, PAGE_SIZE
from userboard.state.table_state import PendingConfirmation, TableState, UserRecord
from userboard.utils.data_source import DataFetchError, fetch_users

logger = logging.getLogger(__name__)

DELETE_SELECTED = 'delete_selected'
DELETE_ONE = 'delete_one'
BEGIN_EDIT = 'begin_edit'


@dataclass(frozen=True)
class TableView:
    """Derived, read-only view of the table for the presentation layer."""
    filtered_users: List[UserRecord]
    paged_users: List[UserRecord]
    current_page: int
    page_count: int
    page_size: int
    total_count: int
    selected_ids: FrozenSet[int] = field(default_factory=frozenset)
    editing_id: Optional[int] = None
    draft: Optional[Dict[str, str]] = None

    @property
    def filtered_count(self) -> int:
        return len(self.filtered_users)

    @property
    def filtered_ids(self) -> FrozenSet[int]:
        return frozenset(user.id for user in self.filtered_users)

    @property
    def all_selected(self) -> bool:
        return bool(self.filtered_users) and self.selected_ids == self.filtered_ids

    @property
    def select_all_disabled(self) -> bool:
        return not self.filtered_users

    @property
    def is_first_page(self) -> bool:
        return self.current_page <= 1

    @property
    def is_last_page(self) -> bool:
        return self.current_page >= self.page_count

    @property
    def first_page_target(self) -> int:
        return 1

    @property
    def previous_page_target(self) -> int:
        return max(1, self.current_page - 1)

    @property
    def next_page_target(self) -> int:
        return min(self.page_count, self.current_page + 1)

    @property
    def last_page_target(self) -> int:
        return self.page_count

    @property
    def range_label(self) -> str:
        if not self.filtered_users:
            return "No users to show"
        start = (self.current_page - 1) * self.page_size + 1
        end = start + len(self.paged_users) - 1
        return f"Showing {start}-{end} of {self.filtered_count}"


class TableStateController:
    """
    Owns one TableState and exposes the table operations.

    The controller is cheap to build: Dash callbacks construct one from the
    session store, apply a single operation, and serialize the state back.
    """

    def __init__(self, state: Optional[TableState] = None, page_size: int = PAGE_SIZE,
                 clear_selection_on_single_delete: bool = CLEAR_SELECTION_ON_SINGLE_DELETE):
        self.state = state if state is not None else TableState()
        self.page_size = page_size
        self.clear_selection_on_single_delete = clear_selection_on_single_delete
        self.view = self.derive()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _matches(self, user: UserRecord) -> bool:
        state = self.state
        if state.name_filter.lower() not in user.name.lower():
            return False
        if state.email_filter.lower() not in user.email.lower():
            return False
        return not state.role_filters or user.role.lower() in state.role_filters

    def derive(self) -> TableView:
        """Recompute the filtered, sorted and paged view and restore invariants."""
        state = self.state

        filtered = sorted((user for user in state.users if self._matches(user)), key=lambda user: user.id)
        page_count = max(1, math.ceil(len(filtered) / self.page_size))
        state.current_page = min(max(state.current_page, 1), page_count)

        visible_ids = {user.id for user in filtered}
        state.selected_ids &= visible_ids

        if state.editing_id is not None and state.find_user(state.editing_id) is None:
            state.editing_id = None
            state.draft = None

        start = (state.current_page - 1) * self.page_size
        self.view = TableView(
            filtered_users=filtered,
            paged_users=filtered[start:start + self.page_size],
            current_page=state.current_page,
            page_count=page_count,
            page_size=self.page_size,
            total_count=len(state.users),
            selected_ids=frozenset(state.selected_ids),
            editing_id=state.editing_id,
            draft=dict(state.draft) if state.draft is not None else None,
        )
        return self.view

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, fetch: Optional[Callable[[], List[UserRecord]]] = None) -> bool:
        """
        Fetch the user collection and reset derived state.

        Args:
            fetch: Callable returning user records, defaults to fetch_users

        Returns:
            bool: True if the users were replaced, False if the fetch failed
        """
        fetch = fetch or fetch_users
        try:
            records = fetch()
        except DataFetchError as e:
            logger.error(f"[TABLE CONTROLLER] Error fetching users: {str(e)}")
            return False

        self.load_records(records)
        return True

    def load_records(self, records: Iterable[UserRecord]) -> TableView:
        """Replace the working set; filters are kept, everything else resets."""
        state = self.state
        state.users = list(records)
        state.current_page = 1
        state.selected_ids = set()
        state.editing_id = None
        state.draft = None
        state.pending = None
        state.loaded = True
        logger.info(f"[TABLE CONTROLLER] Loaded {len(state.users)} users")
        return self.derive()

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def set_name_filter(self, value: Optional[str]) -> TableView:
        self.state.name_filter = value or ""
        return self.derive()

    def set_email_filter(self, value: Optional[str]) -> TableView:
        self.state.email_filter = value or ""
        return self.derive()

    def toggle_role_filter(self, role: str) -> TableView:
        role = role.lower()
        if role in self.state.role_filters:
            self.state.role_filters.discard(role)
        else:
            self.state.role_filters.add(role)
        return self.derive()

    def set_role_filters(self, roles: Optional[Iterable[str]]) -> TableView:
        """Toggle every role whose checked state differs from ``roles``."""
        wanted = {role.lower() for role in roles or []}
        for role in sorted(wanted ^ self.state.role_filters):
            self.toggle_role_filter(role)
        return self.derive()

    def clear_filters(self) -> TableView:
        state = self.state
        state.name_filter = ""
        state.email_filter = ""
        state.role_filters = set()
        state.current_page = 1
        return self.derive()

    # ------------------------------------------------------------------
    # Selection and pagination
    # ------------------------------------------------------------------

    def is_selected(self, user_id: int) -> bool:
        return user_id in self.state.selected_ids

    def toggle_select_all(self) -> TableView:
        filtered_ids = set(self.view.filtered_ids)
        if self.state.selected_ids == filtered_ids:
            self.state.selected_ids = set()
        else:
            self.state.selected_ids = filtered_ids
        return self.derive()

    def toggle_select_row(self, user_id: int) -> TableView:
        if user_id in self.state.selected_ids:
            self.state.selected_ids.discard(user_id)
        else:
            self.state.selected_ids.add(user_id)
        return self.derive()

    def set_page(self, page: int) -> TableView:
        self.state.current_page = page
        return self.derive()

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def _forget_edit_if_removed(self, removed_ids) -> None:
        if self.state.editing_id in removed_ids:
            self.state.editing_id = None
            self.state.draft = None

    def delete_selected(self) -> TableView:
        state = self.state
        removed = set(state.selected_ids)
        state.users = [user for user in state.users if user.id not in removed]
        state.selected_ids = set()
        self._forget_edit_if_removed(removed)
        logger.info(f"[TABLE CONTROLLER] Deleted {len(removed)} selected users")
        return self.derive()

    def delete_one(self, user_id: int) -> TableView:
        state = self.state
        before = len(state.users)
        state.users = [user for user in state.users if user.id != user_id]
        if self.clear_selection_on_single_delete:
            state.selected_ids = set()
        else:
            state.selected_ids.discard(user_id)
        self._forget_edit_if_removed({user_id})
        if len(state.users) < before:
            logger.info(f"[TABLE CONTROLLER] Deleted user {user_id}")
        return self.derive()

    def request_delete_selected(self) -> TableView:
        if self.state.selected_ids:
            self.state.pending = PendingConfirmation(
                action=DELETE_SELECTED,
                message="Do you want to delete the selected rows?",
            )
        return self.derive()

    def request_delete_one(self, user_id: int) -> TableView:
        user = self.state.find_user(user_id)
        if user is not None:
            self.state.pending = PendingConfirmation(
                action=DELETE_ONE,
                message=f'Do you want to delete the user "{user.name}"?',
                target_id=user_id,
            )
        return self.derive()

    def resolve_confirmation(self, accepted: bool) -> TableView:
        """Run the pending operation if accepted; always clear it."""
        pending = self.state.pending
        self.state.pending = None
        if pending is None or not accepted:
            return self.derive()

        if pending.action == DELETE_SELECTED:
            return self.delete_selected()
        if pending.action == DELETE_ONE:
            return self.delete_one(pending.target_id)
        if pending.action == BEGIN_EDIT:
            return self._start_edit(pending.target_id)

        logger.warning(f"[TABLE CONTROLLER] Unknown pending action: {pending.action}")
        return self.derive()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def draft_is_dirty(self) -> bool:
        state = self.state
        if state.editing_id is None or state.draft is None:
            return False
        user = state.find_user(state.editing_id)
        return user is not None and state.draft != user.editable_fields()

    def _start_edit(self, user_id: int) -> TableView:
        user = self.state.find_user(user_id)
        if user is not None:
            self.state.editing_id = user_id
            self.state.draft = user.editable_fields()
        return self.derive()

    def begin_edit(self, user_id: int) -> TableView:
        """
        Toggle editing for a row.

        Editing the same row again cancels. Switching rows discards the other
        row's draft; a modified draft is only discarded after confirmation.
        """
        state = self.state
        user = state.find_user(user_id)
        if user is None:
            return self.derive()

        if state.editing_id == user_id:
            state.editing_id = None
            state.draft = None
            return self.derive()

        if self.draft_is_dirty():
            editing_user = state.find_user(state.editing_id)
            state.pending = PendingConfirmation(
                action=BEGIN_EDIT,
                message=f'Discard unsaved changes to "{editing_user.name}"?',
                target_id=user_id,
            )
            return self.derive()

        return self._start_edit(user_id)

    def update_draft(self, field_name: str, value: Optional[str]) -> TableView:
        state = self.state
        if state.editing_id is not None and state.draft is not None and field_name in EDITABLE_FIELDS:
            state.draft[field_name] = value if value is not None else ""
        return self.derive()

    def commit_edit(self, user_id: int, fields: Optional[Dict[str, str]] = None) -> TableView:
        """
        Replace name, email and role of one record and leave edit mode.

        Args:
            user_id: Record to update
            fields: New values; defaults to the current draft when editing ``user_id``
        """
        state = self.state
        user = state.find_user(user_id)
        if user is None:
            return self.derive()

        if fields is None:
            fields = state.draft if state.editing_id == user_id and state.draft is not None else {}

        values = user.editable_fields()
        for name in EDITABLE_FIELDS:
            if name in fields:
                values[name] = fields[name] if fields[name] is not None else ""

        updated = user.with_fields(**values)
        state.users = [updated if item.id == user_id else item for item in state.users]
        state.editing_id = None
        state.draft = None
        logger.info(f"[TABLE CONTROLLER] Saved user {user_id}")
        return self.derive()


def apply_intent(controller: TableStateController, intent: str, payload=None) -> TableView:
    """
    Route one presentation-layer intent to the matching controller operation.

    Args:
        controller: Controller owning the session state
        intent: Intent name forwarded by the presentation layer
        payload: Intent argument (filter text, role list, row id, ...)

    Returns:
        TableView: View derived after the operation
    """
    view = controller.view

    if intent == 'set_name_filter':
        return controller.set_name_filter(payload)
    if intent == 'set_email_filter':
        return controller.set_email_filter(payload)
    if intent == 'set_role_filters':
        return controller.set_role_filters(payload)
    if intent == 'clear_filters':
        return controller.clear_filters()
    if intent == 'toggle_select_all':
        return controller.toggle_select_all()
    if intent == 'toggle_select_row':
        return controller.toggle_select_row(payload)
    if intent == 'first_page':
        return controller.set_page(view.first_page_target)
    if intent == 'previous_page':
        return controller.set_page(view.previous_page_target)
    if intent == 'next_page':
        return controller.set_page(view.next_page_target)
    if intent == 'last_page':
        return controller.set_page(view.last_page_target)
    if intent == 'request_delete_selected':
        return controller.request_delete_selected()
    if intent == 'request_delete_one':
        return controller.request_delete_one(payload)
    if intent == 'begin_edit':
        return controller.begin_edit(payload)
    if intent == 'update_draft':
        field_name, value = payload
        return controller.update_draft(field_name, value)
    if intent == 'commit_edit':
        user_id, fields = payload
        return controller.commit_edit(user_id, fields)
    if intent == 'confirm':
        return controller.resolve_confirmation(True)
    if intent == 'cancel':
        return controller.resolve_confirmation(False)

    logger.warning(f"[TABLE CONTROLLER] Ignoring unknown intent: {intent}")
    return controller.derive()
