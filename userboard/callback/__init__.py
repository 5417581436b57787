"""
Dash callbacks for the Userboard application.

Importing a callback module registers its callbacks on ``userboard.app.app``.
"""
