import dash
import dash_bootstrap_components as dbc

from userboard.constants import APP_TITLE
from userboard.pages.dashboard_layout import serve_layout

# Table header and rows are rendered by callbacks, so their pattern-matching
# ids are not part of the initial layout.
app = dash.Dash(
    __name__,
    title=APP_TITLE,
    external_stylesheets=[dbc.themes.BOOTSTRAP, dbc.icons.FONT_AWESOME],
    suppress_callback_exceptions=True,
)
server = app.server

app.layout = serve_layout
