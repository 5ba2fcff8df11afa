"""Attendance Bot package.

Telegram front end for class attendance, organized by feature modules
(users, schedules, attendance, undo, stats) with a thin bot controller layer
and service/repository layers underneath.
"""
