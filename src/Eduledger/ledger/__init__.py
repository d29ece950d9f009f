"""Ledger engine: invoicing, payroll and student balance bookkeeping.

Every operation keeps ``student.balance`` equal to the sum of that
student's transaction amounts.
"""
