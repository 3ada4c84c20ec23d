from .validator import REQUIRED_FIELDS, ResponseValidator

__all__ = ["REQUIRED_FIELDS", "ResponseValidator"]
