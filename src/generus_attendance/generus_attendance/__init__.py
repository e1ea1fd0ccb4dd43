"""Generus Attendance package.

Organized by feature modules (members, kbm, attendance, checkins, statistics, ...)
with a thin Flask controller layer over service/repository layers.
"""
