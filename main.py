import logging

from userboard.app import app, server

# Import callback modules to register them with Dash
from userboard.callback import table_callbacks
from userboard.callback import export_callbacks

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Run the server
    app.run(debug=True, use_reloader=False, dev_tools_hot_reload=False)
