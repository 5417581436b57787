"""
State management modules for the Userboard table.

This package holds the explicit, serializable state struct that the table
controller owns and the Dash store carries between callbacks.
"""

from userboard.state.table_state import PendingConfirmation, TableState, UserRecord

__all__ = ['PendingConfirmation', 'TableState', 'UserRecord']
