"""Pydantic domain models for the expense service."""

from .expense import ExpenseIn, ExpenseOut, ExpenseUpdateIn

__all__ = [
    "ExpenseIn",
    "ExpenseOut",
    "ExpenseUpdateIn",
]
