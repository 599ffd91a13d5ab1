"""Classroom ledger package.

Organized by feature modules (progress, attendance, grades, payroll,
transfers) around an in-memory record store, with a thin Flask controller
layer over the services.
"""
