"""
Userboard Controllers Package

Controllers own the table state and provide the only way to mutate it.

Controllers:
- table_controller: filters, pagination, selection, editing and deletion of user rows
"""

from userboard.controller.table_controller import TableStateController, TableView, apply_intent

__all__ = ['TableStateController', 'TableView', 'apply_intent']
