class DashboardIds:
    # Session state
    TABLE_STATE_STORE = 'table-state-store'

    # Filters and toolbar
    NAME_FILTER = 'name-filter'
    EMAIL_FILTER = 'email-filter'
    ROLE_FILTER = 'role-filter'
    CLEAR_FILTERS_BUTTON = 'clear-filters-btn'
    DELETE_SELECTED_BUTTON = 'delete-selected-btn'
    RELOAD_BUTTON = 'reload-users-btn'
    EXPORT_BUTTON = 'export-users-btn'
    EXPORT_DOWNLOAD = 'export-users-download'

    # Table
    TABLE_HEAD = 'user-table-head'
    TABLE_BODY = 'user-table-body'
    RANGE_LABEL = 'user-table-range'

    # Pagination
    PAGE_LABEL = 'page-number'
    FIRST_PAGE_BUTTON = 'first-page-btn'
    PREVIOUS_PAGE_BUTTON = 'previous-page-btn'
    NEXT_PAGE_BUTTON = 'next-page-btn'
    LAST_PAGE_BUTTON = 'last-page-btn'

    # Confirmation prompt for deletes and discarded edits
    CONFIRM_DIALOG = 'confirm-dialog'

    # Pattern-matching component types (id = {'type': ..., 'index': user id})
    SELECT_ALL = 'select-all'
    ROW_SELECT = 'row-select'
    ROW_EDIT = 'row-edit'
    ROW_SAVE = 'row-save'
    ROW_DELETE = 'row-delete'
    EDIT_FIELD = 'edit-field'
