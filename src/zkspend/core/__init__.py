"""Spend verification core: primitives, engine and host facade."""
