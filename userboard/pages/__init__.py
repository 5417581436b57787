"""
Page layouts for the Userboard application.
"""
