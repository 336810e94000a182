"""HR Payroll package.

This package is organized by feature modules (employees, nik, leave, payroll, ...)
with a thin Flask JSON controller layer and SOLID service/repository layers.
"""
