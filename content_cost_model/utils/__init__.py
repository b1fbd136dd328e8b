from .parsing import clamp, to_int, to_non_negative, to_number

__all__ = ["clamp", "to_int", "to_non_negative", "to_number"]
