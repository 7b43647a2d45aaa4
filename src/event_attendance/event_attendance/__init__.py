"""Event Attendance package.

This package is organized by feature modules (events, members, attendance,
roster, checkin, recap) with a thin Flask controller layer and
service/repository layers underneath.
"""
