"""Utility functions for bonusledger."""

from bonusledger.utils.date_parser import parse_date
from bonusledger.utils.amount_parser import parse_amount
from bonusledger.utils.money import round_money

__all__ = ["parse_date", "parse_amount", "round_money"]
