"""Campus Attendance package.

Feature modules (attendance, subjects, ...) with a thin Flask controller layer
over service/repository layers. The aggregation engine in
``attendance.aggregator`` is pure and has no I/O.
"""
