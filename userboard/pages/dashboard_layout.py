"""
Dashboard layout and table rendering for the user admin page.

The static layout holds the filter toolbar, the table shell, pagination and
the session store. Table header and body are rendered from a TableView by
``render_table_head`` / ``render_table_body`` so that the row controls always
reflect the controller state.
"""

from typing import List

import dash_bootstrap_components as dbc
from dash import dcc, html

from userboard.constants import APP_TITLE, EDITABLE_FIELDS, ROLE_OPTIONS
from userboard.controller.table_controller import TableView
from userboard.pages.ids import DashboardIds
from userboard.state.table_state import TableState, UserRecord

ids = DashboardIds

COLUMN_TITLES = ["ID", "Name", "Email", "Role", "Action"]


def _icon_button(icon: str, component_id, title: str, color: str = "link"):
    return dbc.Button(
        html.I(className=icon, title=title),
        id=component_id,
        color=color,
        size="sm",
        n_clicks=0,
        className="px-2",
    )


def render_table_head(view: TableView) -> html.Tr:
    """Header row with the select-all checkbox spanning the filtered set."""
    return html.Tr([
        html.Th(
            dbc.Checkbox(
                id={'type': ids.SELECT_ALL, 'index': 'users'},
                value=view.all_selected,
                disabled=view.select_all_disabled,
            ),
            style={"width": "40px"}
        ),
        *[html.Th(title) for title in COLUMN_TITLES]
    ])


def _render_cell(user: UserRecord, field_name: str, view: TableView):
    if view.editing_id != user.id:
        return html.Td(getattr(user, field_name))

    draft = view.draft or user.editable_fields()
    return html.Td(
        dbc.Input(
            id={'type': ids.EDIT_FIELD, 'field': field_name, 'index': user.id},
            type="text",
            size="sm",
            value=draft.get(field_name, ""),
            debounce=True,
        )
    )


def render_table_row(user: UserRecord, view: TableView) -> html.Tr:
    selected = user.id in view.selected_ids
    editing = view.editing_id == user.id

    class_names = []
    if selected:
        class_names.append("selected-row table-active")
    if editing:
        class_names.append("editing-row table-warning")

    if editing:
        edit_control = _icon_button("fa-solid fa-check", {'type': ids.ROW_SAVE, 'index': user.id}, "Save")
    else:
        edit_control = _icon_button("fas fa-edit", {'type': ids.ROW_EDIT, 'index': user.id}, "Edit")

    return html.Tr([
        html.Td(dbc.Checkbox(id={'type': ids.ROW_SELECT, 'index': user.id}, value=selected)),
        html.Td(user.id),
        *[_render_cell(user, field_name, view) for field_name in EDITABLE_FIELDS],
        html.Td([
            edit_control,
            _icon_button("fas fa-trash-alt", {'type': ids.ROW_DELETE, 'index': user.id}, "Delete", color="link"),
        ], className="text-nowrap"),
    ], className=" ".join(class_names))


def render_table_body(view: TableView) -> List:
    if not view.paged_users:
        return [html.Tr(html.Td("No users found", colSpan=len(COLUMN_TITLES) + 1,
                                className="text-muted text-center"))]
    return [render_table_row(user, view) for user in view.paged_users]


def _pagination_bar():
    return html.Div([
        dbc.Button(html.I(className="fa-solid fa-angles-left"), id=ids.FIRST_PAGE_BUTTON,
                   color="secondary", outline=True, size="sm", n_clicks=0, disabled=True),
        dbc.Button(html.I(className="fa-solid fa-angle-left"), id=ids.PREVIOUS_PAGE_BUTTON,
                   color="secondary", outline=True, size="sm", n_clicks=0, disabled=True),
        html.Span("Page 1", id=ids.PAGE_LABEL, className="mx-3 fw-semibold"),
        dbc.Button(html.I(className="fa-solid fa-chevron-right"), id=ids.NEXT_PAGE_BUTTON,
                   color="secondary", outline=True, size="sm", n_clicks=0, disabled=True),
        dbc.Button(html.I(className="fa-solid fa-angles-right"), id=ids.LAST_PAGE_BUTTON,
                   color="secondary", outline=True, size="sm", n_clicks=0, disabled=True),
    ], className="d-flex justify-content-center align-items-center gap-1 my-3")


def _filter_toolbar():
    return dbc.Row([
        dbc.Col(dbc.Input(id=ids.NAME_FILTER, placeholder="Filter by Name", type="text", value=""), md=3),
        dbc.Col(dbc.Input(id=ids.EMAIL_FILTER, placeholder="Filter by Email", type="text", value=""), md=3),
        dbc.Col([
            html.Span("Filter by Role:", className="me-2"),
            dbc.Checklist(id=ids.ROLE_FILTER, options=ROLE_OPTIONS, value=[], inline=True),
        ], md=3, className="d-flex align-items-center"),
        dbc.Col([
            dbc.Button("Clear Filters", id=ids.CLEAR_FILTERS_BUTTON, color="secondary", size="sm",
                       n_clicks=0, className="me-2"),
            dbc.Button(html.I(className="fa-regular fa-trash-can"), id=ids.DELETE_SELECTED_BUTTON,
                       color="danger", size="sm", n_clicks=0, className="me-2"),
            dbc.Button(html.I(className="fas fa-sync-alt"), id=ids.RELOAD_BUTTON,
                       color="light", size="sm", n_clicks=0, className="me-2"),
            dbc.Button(html.I(className="fas fa-file-csv"), id=ids.EXPORT_BUTTON,
                       color="light", size="sm", n_clicks=0),
        ], md=3, className="d-flex justify-content-end align-items-center"),
    ], className="g-2 mb-3")


def serve_layout():
    """Build the page layout; the store starts empty and is reset on reload."""
    return dbc.Container(fluid=True, className="dashboard-container py-4", children=[
        html.H1(APP_TITLE, className="dashboard-heading mb-4"),
        _filter_toolbar(),
        dbc.Table([
            html.Thead(id=ids.TABLE_HEAD),
            html.Tbody(id=ids.TABLE_BODY),
        ], bordered=False, hover=True, responsive=True, size="sm"),
        html.Div(id=ids.RANGE_LABEL, className="text-muted small"),
        _pagination_bar(),
        dcc.ConfirmDialog(id=ids.CONFIRM_DIALOG, message=""),
        dcc.Download(id=ids.EXPORT_DOWNLOAD),
        dcc.Store(id=ids.TABLE_STATE_STORE, storage_type='memory', data=TableState().to_dict()),
    ])
