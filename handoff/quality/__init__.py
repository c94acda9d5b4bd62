"""Document quality scoring."""

from .scorer import PASS_THRESHOLD, DocumentScore, QualityReport, check_folder, score_document, score_folder

__all__ = [
    "PASS_THRESHOLD",
    "DocumentScore",
    "QualityReport",
    "check_folder",
    "score_document",
    "score_folder",
]
