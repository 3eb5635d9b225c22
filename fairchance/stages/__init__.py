from .base import LetterStage, NoticeSendError, SendInProgressError, Stage
from .assessment import AssessmentStage
from .preliminary import PreliminaryNoticeStage
from .reassessment import ReassessmentStage
from .final import FinalNoticeStage

__all__ = [
    "Stage",
    "LetterStage",
    "SendInProgressError",
    "NoticeSendError",
    "AssessmentStage",
    "PreliminaryNoticeStage",
    "ReassessmentStage",
    "FinalNoticeStage",
]
