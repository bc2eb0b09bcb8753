"""Attendance Reconciliation Engine.

This package is organized by feature modules (attendance, reconciliation,
summary, ...) with a thin Flask controller layer on top of service/repository
layers. Services only depend on repository protocols, so every job can run
against MySQL or an in-memory store.
"""
