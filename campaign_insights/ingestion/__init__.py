from .cleaner import apply_cleaning
from .loader import RecordLoader

__all__ = ["RecordLoader", "apply_cleaning"]
