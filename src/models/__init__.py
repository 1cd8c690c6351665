from .visit import Visit
from .patient import Patient
from .master_index import MasterIndex, MasterIndexRow

__all__ = ["Visit", "Patient", "MasterIndex", "MasterIndexRow"]
