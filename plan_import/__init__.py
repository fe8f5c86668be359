"""Project-plan spreadsheet importer.

Reconstructs a Phase -> SubPhase -> Task hierarchy from an ISO-style
implementation checklist workbook and writes it in one transaction.
"""

from .excel.reader import ParseError
from .services.importer import ImportRequestError, import_project_plan
from .services.parser import parse

__all__ = [
    "ParseError",
    "ImportRequestError",
    "import_project_plan",
    "parse",
]
