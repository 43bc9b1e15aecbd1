from .conv import date_key, parse_date, to_dec_strict, to_minor_units

__all__ = ["to_dec_strict", "to_minor_units", "parse_date", "date_key"]
