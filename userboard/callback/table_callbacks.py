"""
User Table Callbacks
Load, intent dispatch and rendering for the user table

All table state lives in the memory store ``table-state-store``. Each
callback rebuilds a TableStateController from the store, applies at most one
operation and writes the serialized state back:

- load_user_table: initial page load and Reload button → controller.load()
- dispatch_table_intent: single writer for every user intent (filters,
  selection, pagination, deletes, edits, confirmation answers)
- render_user_table: store → table header/body, pagination, confirm dialog
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import dash
from dash import ALL, Input, Output, State, callback_context
from dash.exceptions import PreventUpdate

from userboard.app import app
from userboard.controller.table_controller import TableStateController, apply_intent
from userboard.pages.dashboard_layout import render_table_body, render_table_head
from userboard.pages.ids import DashboardIds
from userboard.state.table_state import TableState

ids = DashboardIds

# Static buttons mapped to intents that take no argument
BUTTON_INTENTS = {
    ids.CLEAR_FILTERS_BUTTON: 'clear_filters',
    ids.DELETE_SELECTED_BUTTON: 'request_delete_selected',
    ids.FIRST_PAGE_BUTTON: 'first_page',
    ids.PREVIOUS_PAGE_BUTTON: 'previous_page',
    ids.NEXT_PAGE_BUTTON: 'next_page',
    ids.LAST_PAGE_BUTTON: 'last_page',
}

# Per-row buttons mapped to intents that take the row id
ROW_BUTTON_INTENTS = {
    ids.ROW_EDIT: 'begin_edit',
    ids.ROW_DELETE: 'request_delete_one',
}


def parse_prop_id(prop_id: str) -> Tuple[Any, str]:
    """
    Split a triggered ``prop_id`` into component id and property.

    Pattern-matching ids arrive as JSON strings, e.g.
    ``{"index":3,"type":"row-edit"}.n_clicks``.
    """
    component_id, _, prop = prop_id.rpartition('.')
    if component_id.startswith('{'):
        component_id = json.loads(component_id)
    return component_id, prop


def collect_edit_fields(field_ids: Optional[List[Dict]], field_values: Optional[List], user_id: int) -> Dict[str, str]:
    """Pick the edit input values that belong to ``user_id``."""
    fields = {}
    for field_id, value in zip(field_ids or [], field_values or []):
        if field_id.get('index') == user_id:
            fields[field_id['field']] = value if value is not None else ""
    return fields


def resolve_intent(controller: TableStateController, prop_id: str, value,
                   field_ids: Optional[List[Dict]] = None,
                   field_values: Optional[List] = None) -> Optional[Tuple[str, Any]]:
    """
    Translate one triggered component property into a controller intent.

    Args:
        controller: Controller built from the current store
        prop_id: ``callback_context.triggered[0]['prop_id']``
        value: Triggered property value
        field_ids: Ids of the inline edit inputs currently rendered
        field_values: Values of the inline edit inputs, aligned with field_ids

    Returns:
        (intent, payload) or None when the trigger carries no user intent
    """
    component_id, prop = parse_prop_id(prop_id)

    if isinstance(component_id, dict):
        kind = component_id.get('type')
        user_id = component_id.get('index')

        if kind == ids.SELECT_ALL:
            # Re-rendered checkboxes report the state they were rendered with
            if value is None or bool(value) == controller.view.all_selected:
                return None
            return 'toggle_select_all', None

        if kind == ids.ROW_SELECT:
            if value is None or bool(value) == controller.is_selected(user_id):
                return None
            return 'toggle_select_row', user_id

        if kind == ids.EDIT_FIELD:
            if controller.state.editing_id != user_id or value is None:
                return None
            return 'update_draft', (component_id['field'], value)

        if not value:
            return None

        if kind == ids.ROW_SAVE:
            return 'commit_edit', (user_id, collect_edit_fields(field_ids, field_values, user_id) or None)
        if kind in ROW_BUTTON_INTENTS:
            return ROW_BUTTON_INTENTS[kind], user_id
        return None

    if component_id == ids.NAME_FILTER:
        return 'set_name_filter', value
    if component_id == ids.EMAIL_FILTER:
        return 'set_email_filter', value
    if component_id == ids.ROLE_FILTER:
        return 'set_role_filters', value or []

    if not value:
        return None

    if component_id == ids.CONFIRM_DIALOG:
        return ('confirm', None) if prop == 'submit_n_clicks' else ('cancel', None)
    if component_id in BUTTON_INTENTS:
        return BUTTON_INTENTS[component_id], None
    return None


@app.callback(
    Output(ids.TABLE_STATE_STORE, 'data'),
    Input(ids.RELOAD_BUTTON, 'n_clicks'),
    State(ids.TABLE_STATE_STORE, 'data'),
)
def load_user_table(n_clicks, store_data):
    """Fetch users on page load and on Reload; a failed fetch keeps the table as it is."""
    controller = TableStateController(TableState.from_dict(store_data))
    if not controller.load():
        return dash.no_update
    return controller.state.to_dict()


@app.callback(
    [Output(ids.TABLE_STATE_STORE, 'data', allow_duplicate=True),
     Output(ids.NAME_FILTER, 'value'),
     Output(ids.EMAIL_FILTER, 'value'),
     Output(ids.ROLE_FILTER, 'value')],
    [Input(ids.NAME_FILTER, 'value'),
     Input(ids.EMAIL_FILTER, 'value'),
     Input(ids.ROLE_FILTER, 'value'),
     Input(ids.CLEAR_FILTERS_BUTTON, 'n_clicks'),
     Input(ids.DELETE_SELECTED_BUTTON, 'n_clicks'),
     Input(ids.FIRST_PAGE_BUTTON, 'n_clicks'),
     Input(ids.PREVIOUS_PAGE_BUTTON, 'n_clicks'),
     Input(ids.NEXT_PAGE_BUTTON, 'n_clicks'),
     Input(ids.LAST_PAGE_BUTTON, 'n_clicks'),
     Input(ids.CONFIRM_DIALOG, 'submit_n_clicks'),
     Input(ids.CONFIRM_DIALOG, 'cancel_n_clicks'),
     Input({'type': ids.SELECT_ALL, 'index': ALL}, 'value'),
     Input({'type': ids.ROW_SELECT, 'index': ALL}, 'value'),
     Input({'type': ids.ROW_EDIT, 'index': ALL}, 'n_clicks'),
     Input({'type': ids.ROW_SAVE, 'index': ALL}, 'n_clicks'),
     Input({'type': ids.ROW_DELETE, 'index': ALL}, 'n_clicks'),
     Input({'type': ids.EDIT_FIELD, 'field': ALL, 'index': ALL}, 'value')],
    [State({'type': ids.EDIT_FIELD, 'field': ALL, 'index': ALL}, 'id'),
     State({'type': ids.EDIT_FIELD, 'field': ALL, 'index': ALL}, 'value'),
     State(ids.TABLE_STATE_STORE, 'data')],
    prevent_initial_call=True
)
def dispatch_table_intent(name_filter, email_filter, role_filters, *args):
    """
    Master callback for table intents.

    This is the single point where user interaction mutates the table state.
    Filter widgets are only written back on Clear Filters so typing is never
    overwritten by a stale value.
    """
    ctx = callback_context
    if not ctx.triggered:
        raise PreventUpdate

    field_ids, field_values, store_data = args[-3:]
    trigger = ctx.triggered[0]

    controller = TableStateController(TableState.from_dict(store_data))
    resolved = resolve_intent(controller, trigger['prop_id'], trigger['value'], field_ids, field_values)
    if resolved is None:
        raise PreventUpdate

    intent, payload = resolved
    apply_intent(controller, intent, payload)

    state = controller.state
    if intent == 'clear_filters':
        return state.to_dict(), state.name_filter, state.email_filter, sorted(state.role_filters)
    return state.to_dict(), dash.no_update, dash.no_update, dash.no_update


@app.callback(
    [Output(ids.TABLE_HEAD, 'children'),
     Output(ids.TABLE_BODY, 'children'),
     Output(ids.RANGE_LABEL, 'children'),
     Output(ids.PAGE_LABEL, 'children'),
     Output(ids.FIRST_PAGE_BUTTON, 'disabled'),
     Output(ids.PREVIOUS_PAGE_BUTTON, 'disabled'),
     Output(ids.NEXT_PAGE_BUTTON, 'disabled'),
     Output(ids.LAST_PAGE_BUTTON, 'disabled'),
     Output(ids.CONFIRM_DIALOG, 'displayed'),
     Output(ids.CONFIRM_DIALOG, 'message')],
    Input(ids.TABLE_STATE_STORE, 'data'),
)
def render_user_table(store_data):
    """Render the table and its controls from the derived view."""
    controller = TableStateController(TableState.from_dict(store_data))
    view = controller.view
    pending = controller.state.pending

    return (
        render_table_head(view),
        render_table_body(view),
        view.range_label,
        f"Page {view.current_page} of {view.page_count}",
        view.is_first_page,
        view.is_first_page,
        view.is_last_page,
        view.is_last_page,
        pending is not None,
        pending.message if pending is not None else "",
    )
