"""
Shared test setup.

Points the history database at a throwaway file before any klartext
module is imported, so tests never touch a real history.
"""

import os
import tempfile

os.environ.setdefault(
    "KLARTEXT_HISTORY_DB",
    os.path.join(tempfile.mkdtemp(prefix="klartext-tests-"), "history.db"),
)
