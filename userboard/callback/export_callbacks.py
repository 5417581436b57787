import logging

import pandas as pd
from dash import Input, Output, State, dcc
from dash.exceptions import PreventUpdate

from userboard.app import app
from userboard.controller.table_controller import TableStateController
from userboard.pages.ids import DashboardIds
from userboard.state.table_state import TableState

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['id', 'name', 'email', 'role']


def filtered_users_frame(store_data) -> pd.DataFrame:
    """Filtered users, sorted by id, as a DataFrame with a fixed column order."""
    view = TableStateController(TableState.from_dict(store_data)).view
    return pd.DataFrame([user.to_dict() for user in view.filtered_users], columns=EXPORT_COLUMNS)


@app.callback(
    Output(DashboardIds.EXPORT_DOWNLOAD, 'data'),
    Input(DashboardIds.EXPORT_BUTTON, 'n_clicks'),
    State(DashboardIds.TABLE_STATE_STORE, 'data'),
    prevent_initial_call=True
)
def export_filtered_users(n_clicks, store_data):
    """Download the rows passing the current filters as CSV."""
    if not n_clicks:
        raise PreventUpdate

    df = filtered_users_frame(store_data)
    logger.info(f"[EXPORT] Exporting {len(df)} users")
    return dcc.send_data_frame(df.to_csv, "users.csv", index=False)
