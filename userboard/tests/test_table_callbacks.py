"""
Tests for the user table callbacks and rendering.

Callbacks are called directly; the intent dispatcher is exercised through
resolve_intent, which takes the triggered prop id the way Dash reports it.
"""

import json
import unittest
from unittest.mock import patch

import dash

from userboard.callback.export_callbacks import filtered_users_frame
from userboard.callback.table_callbacks import (
    load_user_table,
    parse_prop_id,
    render_user_table,
    resolve_intent,
)
from userboard.controller.table_controller import TableStateController, apply_intent
from userboard.pages.dashboard_layout import render_table_row, serve_layout
from userboard.pages.ids import DashboardIds
from userboard.state.table_state import TableState, UserRecord
from userboard.utils.data_source import DataFetchError

ids = DashboardIds


def sample_users():
    return [
        UserRecord(id=3, name="Carol", email="c@x.com", role="member"),
        UserRecord(id=1, name="Alice", email="a@x.com", role="admin"),
        UserRecord(id=2, name="Bob", email="b@x.com", role="admin"),
    ]


def pattern_prop(component_id, prop):
    return json.dumps(component_id, separators=(',', ':'), sort_keys=True) + '.' + prop


def collect_ids(component):
    """Walk a Dash component tree and collect every component id."""
    found = []
    component_id = getattr(component, 'id', None)
    if component_id is not None:
        found.append(component_id)
    children = getattr(component, 'children', None)
    if children is None:
        return found
    if not isinstance(children, (list, tuple)):
        children = [children]
    for child in children:
        found.extend(collect_ids(child))
    return found


class TestResolveIntent(unittest.TestCase):

    def setUp(self):
        self.controller = TableStateController()
        self.controller.load_records(sample_users())

    def test_parse_prop_id(self):
        self.assertEqual(parse_prop_id('name-filter.value'), ('name-filter', 'value'))
        self.assertEqual(
            parse_prop_id('{"index":3,"type":"row-edit"}.n_clicks'),
            ({'index': 3, 'type': 'row-edit'}, 'n_clicks')
        )

    def test_filter_inputs(self):
        self.assertEqual(resolve_intent(self.controller, 'name-filter.value', "ali"), ('set_name_filter', "ali"))
        self.assertEqual(resolve_intent(self.controller, 'email-filter.value', None), ('set_email_filter', None))
        self.assertEqual(resolve_intent(self.controller, 'role-filter.value', None), ('set_role_filters', []))

    def test_buttons_need_clicks(self):
        self.assertIsNone(resolve_intent(self.controller, 'clear-filters-btn.n_clicks', 0))
        self.assertEqual(resolve_intent(self.controller, 'clear-filters-btn.n_clicks', 1), ('clear_filters', None))
        self.assertEqual(resolve_intent(self.controller, 'last-page-btn.n_clicks', 2), ('last_page', None))

    def test_confirm_dialog(self):
        self.assertEqual(resolve_intent(self.controller, 'confirm-dialog.submit_n_clicks', 1), ('confirm', None))
        self.assertEqual(resolve_intent(self.controller, 'confirm-dialog.cancel_n_clicks', 1), ('cancel', None))

    def test_row_select_only_on_change(self):
        prop = pattern_prop({'type': ids.ROW_SELECT, 'index': 2}, 'value')

        self.assertEqual(resolve_intent(self.controller, prop, True), ('toggle_select_row', 2))
        # A checkbox re-rendered with its current state is not an intent
        self.assertIsNone(resolve_intent(self.controller, prop, False))

    def test_select_all_only_on_change(self):
        prop = pattern_prop({'type': ids.SELECT_ALL, 'index': 'users'}, 'value')

        self.assertEqual(resolve_intent(self.controller, prop, True), ('toggle_select_all', None))
        self.controller.toggle_select_all()
        self.assertIsNone(resolve_intent(self.controller, prop, True))
        self.assertEqual(resolve_intent(self.controller, prop, False), ('toggle_select_all', None))

    def test_row_buttons(self):
        edit = pattern_prop({'type': ids.ROW_EDIT, 'index': 1}, 'n_clicks')
        delete = pattern_prop({'type': ids.ROW_DELETE, 'index': 3}, 'n_clicks')

        self.assertIsNone(resolve_intent(self.controller, edit, 0))
        self.assertEqual(resolve_intent(self.controller, edit, 1), ('begin_edit', 1))
        self.assertEqual(resolve_intent(self.controller, delete, 1), ('request_delete_one', 3))

    def test_save_reads_edit_inputs_of_the_row(self):
        self.controller.begin_edit(1)
        field_ids = [
            {'type': ids.EDIT_FIELD, 'field': 'name', 'index': 1},
            {'type': ids.EDIT_FIELD, 'field': 'email', 'index': 1},
            {'type': ids.EDIT_FIELD, 'field': 'role', 'index': 1},
        ]
        field_values = ["Alicia", "alicia@x.com", None]
        save = pattern_prop({'type': ids.ROW_SAVE, 'index': 1}, 'n_clicks')

        intent, payload = resolve_intent(self.controller, save, 1, field_ids, field_values)
        apply_intent(self.controller, intent, payload)

        self.assertEqual(intent, 'commit_edit')
        user = self.controller.state.find_user(1)
        self.assertEqual((user.name, user.email, user.role), ("Alicia", "alicia@x.com", ""))

    def test_edit_field_updates_draft_only_for_edited_row(self):
        prop = pattern_prop({'type': ids.EDIT_FIELD, 'field': 'name', 'index': 2}, 'value')

        self.assertIsNone(resolve_intent(self.controller, prop, "Robert"))
        self.controller.begin_edit(2)
        self.assertEqual(resolve_intent(self.controller, prop, "Robert"), ('update_draft', ('name', "Robert")))


class TestTableCallbacks(unittest.TestCase):

    @patch('userboard.controller.table_controller.fetch_users')
    def test_load_user_table(self, mock_fetch):
        mock_fetch.return_value = sample_users()

        data = load_user_table(0, TableState().to_dict())

        self.assertEqual([user['id'] for user in data['users']], [3, 1, 2])
        self.assertTrue(data['loaded'])

    @patch('userboard.controller.table_controller.fetch_users')
    def test_load_failure_keeps_store(self, mock_fetch):
        mock_fetch.side_effect = DataFetchError("offline")

        with self.assertLogs('userboard.controller.table_controller', level='ERROR'):
            result = load_user_table(1, TableState().to_dict())

        self.assertIs(result, dash.no_update)

    def test_render_user_table(self):
        controller = TableStateController()
        controller.load_records(
            [UserRecord(id=i, name=f"User {i}", email=f"u{i}@x.com", role="member") for i in range(1, 16)]
        )
        controller.set_page(2)
        controller.request_delete_one(12)

        (head, body, range_label, page_label, first_disabled, prev_disabled,
         next_disabled, last_disabled, displayed, message) = render_user_table(controller.state.to_dict())

        self.assertEqual(len(body), 5)
        self.assertEqual(range_label, "Showing 11-15 of 15")
        self.assertEqual(page_label, "Page 2 of 2")
        self.assertEqual((first_disabled, prev_disabled, next_disabled, last_disabled), (False, False, True, True))
        self.assertTrue(displayed)
        self.assertEqual(message, 'Do you want to delete the user "User 12"?')

    def test_render_empty_store(self):
        result = render_user_table(None)

        self.assertEqual(result[2], "No users to show")
        self.assertEqual(result[4:8], (True, True, True, True))
        self.assertFalse(result[8])

    def test_export_frame_follows_filters(self):
        controller = TableStateController()
        controller.load_records(sample_users())
        controller.toggle_role_filter("admin")

        df = filtered_users_frame(controller.state.to_dict())

        self.assertEqual(list(df.columns), ['id', 'name', 'email', 'role'])
        self.assertEqual(df['name'].tolist(), ["Alice", "Bob"])


class TestDashboardLayout(unittest.TestCase):

    def test_layout_contains_controls(self):
        found = collect_ids(serve_layout())

        for component_id in [ids.TABLE_STATE_STORE, ids.NAME_FILTER, ids.EMAIL_FILTER, ids.ROLE_FILTER,
                             ids.CLEAR_FILTERS_BUTTON, ids.DELETE_SELECTED_BUTTON, ids.CONFIRM_DIALOG,
                             ids.FIRST_PAGE_BUTTON, ids.LAST_PAGE_BUTTON, ids.TABLE_BODY]:
            self.assertIn(component_id, found)

    def test_editing_row_renders_inputs_and_save(self):
        controller = TableStateController()
        controller.load_records(sample_users())
        controller.begin_edit(2)

        found = collect_ids(render_table_row(controller.state.find_user(2), controller.view))

        self.assertIn({'type': ids.EDIT_FIELD, 'field': 'name', 'index': 2}, found)
        self.assertIn({'type': ids.ROW_SAVE, 'index': 2}, found)
        self.assertNotIn({'type': ids.ROW_EDIT, 'index': 2}, found)

    def test_plain_row_renders_edit_button(self):
        controller = TableStateController()
        controller.load_records(sample_users())

        found = collect_ids(render_table_row(controller.state.find_user(1), controller.view))

        self.assertIn({'type': ids.ROW_EDIT, 'index': 1}, found)
        self.assertIn({'type': ids.ROW_DELETE, 'index': 1}, found)
        self.assertNotIn({'type': ids.ROW_SAVE, 'index': 1}, found)


if __name__ == '__main__':
    unittest.main()
