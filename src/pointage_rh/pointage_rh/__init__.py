"""Pointage RH package.

HR attendance and payroll back office organized by feature modules
(employees, attendance, payroll, advances, users) with a thin Flask
controller layer over service/repository layers.
"""
