"""Attendance KPI package.

Feature modules (clocks, absences, reports, users) each follow the same
split: plain dataclass models, a repository Protocol with a MySQL
implementation, a service holding the use cases, and a thin Flask controller.
The aggregation engine itself (normalizer, calculator, aggregator, KPIs,
reconciliation) is pure and works on already-fetched rows.
"""
