"""
Credit Ledger - Installment Credit Service

A FastAPI-based service that records sales financed on credit, splits
them into installment schedules, distributes customer payments across
pending installments and answers overdue sweeps.
"""

__version__ = "0.1.0"
