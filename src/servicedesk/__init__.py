"""Service Desk roster package.

Organized by feature modules (profiles, absences, attendance, tasks, ...)
with a thin Flask controller layer over service/repository layers.
"""
