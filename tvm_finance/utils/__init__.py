"""Utility functions for financial calculations."""

from tvm_finance.utils.financial_utils import compound, discount, get_sign

__all__ = ["compound", "discount", "get_sign"]
