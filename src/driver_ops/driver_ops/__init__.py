"""Driver operations package.

Organized by feature modules (clock, timecards, routes, attendance, ...)
with a thin Flask controller layer over service/repository layers.
"""
