import json
import unittest

from userboard.state.table_state import PendingConfirmation, TableState, UserRecord


class TestTableState(unittest.TestCase):

    def test_default_state(self):
        state = TableState.from_dict(None)

        self.assertEqual(state.users, [])
        self.assertEqual(state.current_page, 1)
        self.assertEqual(state.selected_ids, set())
        self.assertEqual(state.role_filters, set())
        self.assertIsNone(state.editing_id)
        self.assertFalse(state.loaded)

    def test_to_dict_is_json_safe(self):
        state = TableState(
            users=[UserRecord(id=2, name="Bob", email="b@x.com", role="admin")],
            selected_ids={2},
            role_filters={"member", "admin"},
            editing_id=2,
            draft={'name': "Bobby", 'email': "b@x.com", 'role': "admin"},
            pending=PendingConfirmation(action='delete_one', message='Delete "Bob"?', target_id=2),
        )

        data = json.loads(json.dumps(state.to_dict()))

        self.assertEqual(data['role_filters'], ["admin", "member"])
        self.assertEqual(data['selected_ids'], [2])
        self.assertEqual(TableState.from_dict(data), state)

    def test_from_dict_lowercases_roles_and_ignores_unknown_keys(self):
        state = TableState.from_dict({'role_filters': ["Admin"], 'current_page': 3, 'theme': "dark"})

        self.assertEqual(state.role_filters, {"admin"})
        self.assertEqual(state.current_page, 3)

    def test_user_record_helpers(self):
        user = UserRecord(id=1, name="Alice", email="a@x.com", role="admin")

        updated = user.with_fields(name="Alicia", email="a@y.com", role="member")

        self.assertEqual(user.name, "Alice")
        self.assertEqual(updated.editable_fields(), {'name': "Alicia", 'email': "a@y.com", 'role': "member"})
        self.assertEqual(UserRecord.from_dict(updated.to_dict()), updated)

    def test_find_user(self):
        state = TableState(users=[UserRecord(id=5, name="Eve", email="e@x.com", role="member")])

        self.assertEqual(state.find_user(5).name, "Eve")
        self.assertIsNone(state.find_user(6))
        self.assertEqual(state.user_ids(), {5})


if __name__ == '__main__':
    unittest.main()
