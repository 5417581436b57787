"""
Shared constants for the Userboard application.

All configuration is fixed at build time; there is no environment lookup.
"""

APP_TITLE = "DashBoard"

# Remote data source for the user table
DATA_SOURCE_URL = "https://geektrust.s3-ap-southeast-1.amazonaws.com/adminui-problem/members.json"
FETCH_TIMEOUT = 30  # seconds

# Rows per table page
PAGE_SIZE = 10

# Roles offered by the role filter (value is the lowercase role name)
ROLE_OPTIONS = [
    {"label": "Admin", "value": "admin"},
    {"label": "Member", "value": "member"},
]

# Editable fields of a user record, in column order
EDITABLE_FIELDS = ["name", "email", "role"]

# Deleting a single row clears the whole selection, not just that row
CLEAR_SELECTION_ON_SINGLE_DELETE = True
