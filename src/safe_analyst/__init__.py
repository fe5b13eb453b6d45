"""SafeAnalyst — rule-based text sanitizer with pattern auto-masking."""

from .types import Category, ReplacementRule, RuleSet, Segment, SelectionCandidate
from .errors import SafeAnalystError, InvalidConfigDocument
from .rules import add_or_update_rule, remove_rule, clear_rules, merge_rules
from .history import HistoryManager
from .mock import generate_mock_value
from .patterns import Detector, DETECTORS, get_detector, register_detector, detect_all
from .sanitizer import Sanitizer, to_plain_text, to_annotated_segments, render_segments
from .serializer import export_rules, import_rules, dumps, loads
from .session import MaskingSession
from .config import create_session, load_config, load_from_yaml

__all__ = [
    "Category", "ReplacementRule", "RuleSet", "Segment", "SelectionCandidate",
    "SafeAnalystError", "InvalidConfigDocument",
    "add_or_update_rule", "remove_rule", "clear_rules", "merge_rules",
    "HistoryManager",
    "generate_mock_value",
    "Detector", "DETECTORS", "get_detector", "register_detector", "detect_all",
    "Sanitizer", "to_plain_text", "to_annotated_segments", "render_segments",
    "export_rules", "import_rules", "dumps", "loads",
    "MaskingSession",
    "create_session", "load_config", "load_from_yaml",
]
__version__ = "0.1.0"
