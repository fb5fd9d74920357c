"""Vedomost attendance journal.

This package is organized by feature modules (users, groups, students,
attendance) with a thin Flask controller layer over service/repository layers,
plus a ``client`` package that keeps the journal state in sync with the API.
"""
