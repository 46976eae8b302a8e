#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Mock order-entry ticket for the stock detail panel.

Nothing is executed: the ticket computes the approximate requirement
(quantity x price), converts the price when switching exchange, validates
the order and produces a confirmation message.
"""

from __future__ import annotations

from dataclasses import dataclass

from stock_data import BSE_FACTOR

SIDES = ("buy", "sell")
EXCHANGES = ("BSE", "NSE")
ORDER_TYPES = ("delivery", "intraday", "mtf")
PRICE_TYPES = ("limit", "market")


class TicketError(ValueError):
    """Order rejected by validation; the message is user-facing."""


def rupees(amount: float) -> str:
    return f"₹{amount:.2f}"


@dataclass
class OrderTicket:
    ticker: str
    price: float = 0.0
    quantity: float = 1.0
    side: str = "buy"
    exchange: str = "BSE"
    order_type: str = "delivery"
    price_type: str = "limit"
    balance: float = 0.0      # demo account is always empty

    @property
    def requirement(self) -> float:
        return self.quantity * self.price

    def set_exchange(self, exchange: str) -> None:
        """Switch exchange and convert the price (BSE quotes at 0.999 x NSE)."""
        if exchange not in EXCHANGES:
            raise TicketError(f"Unknown exchange: {exchange}")
        if exchange == self.exchange:
            return
        if exchange == "BSE":
            self.price = round(self.price * BSE_FACTOR, 2)
        else:
            self.price = round(self.price / BSE_FACTOR, 2)
        self.exchange = exchange

    def validate(self) -> None:
        if self.side not in SIDES:
            raise TicketError(f"Unknown side: {self.side}")
        if self.order_type not in ORDER_TYPES:
            raise TicketError(f"Unknown order type: {self.order_type}")
        if self.price_type not in PRICE_TYPES:
            raise TicketError(f"Unknown price type: {self.price_type}")
        if self.quantity <= 0:
            raise TicketError("Please enter a valid quantity")
        if self.price <= 0 and self.price_type == "limit":
            raise TicketError("Please enter a valid price")

    def submit(self) -> str:
        """Validate and return the confirmation text (raises ``TicketError``)."""
        self.validate()
        qty = f"{self.quantity:g}"
        return (
            f"{self.side.capitalize()} order placed!\n\n"
            f"Quantity: {qty}\n"
            f"Exchange: {self.exchange}\n"
            f"Order Type: {self.order_type.capitalize()}\n"
            f"Price Type: {self.price_type.capitalize()}\n"
            f"Price: {rupees(self.price)}\n"
            f"Total: {rupees(self.requirement)}\n\n"
            f"(This is a demo - no actual trade was executed)"
        )
