"""Ad variations builder.

Composes short text ads by picking one line from each enabled slot, addresses
every combination by ordinal index, layers per-ad overrides on top, and
exports the whole space as a ZIP, one combined document, or separate files.
"""

from avb.addressing import decode, iter_combinations
from avb.composer import compose, entry_name, normalize_file_name
from avb.export import ExportPipeline, ExportReport, ExportStrategy
from avb.model import Candidate, Slot, default_slots
from avb.overrides import AdOverride, OverrideLayer
from avb.session import OutputConfig, Session, SessionState
from avb.space import CombinationSpace
from avb.store import JsonFileStore, MemoryStore, SessionStore

__version__ = "0.1.0"

__all__ = [
    "AdOverride",
    "Candidate",
    "CombinationSpace",
    "ExportPipeline",
    "ExportReport",
    "ExportStrategy",
    "JsonFileStore",
    "MemoryStore",
    "OutputConfig",
    "OverrideLayer",
    "Session",
    "SessionState",
    "SessionStore",
    "Slot",
    "compose",
    "decode",
    "default_slots",
    "entry_name",
    "iter_combinations",
    "normalize_file_name",
]
