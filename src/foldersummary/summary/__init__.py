"""Folder summary service - Classifier, scheduler and publisher."""

from foldersummary.summary.classifier import SUBSCRIPTION_MASK, EventClassifier
from foldersummary.summary.dirty import DirtySet, LastEventRequest
from foldersummary.summary.handoff import ImmediateChannel
from foldersummary.summary.publisher import (
    FolderUnavailableError,
    SummaryError,
    SummaryPublisher,
)
from foldersummary.summary.records import FolderCompletionRecord, FolderSummaryRecord
from foldersummary.summary.scheduler import SchedulerStats, SummaryScheduler
from foldersummary.summary.service import FolderSummaryService
from foldersummary.summary.supervisor import ServiceState, SupervisedTask, Supervisor

__all__ = [
    "SUBSCRIPTION_MASK",
    "DirtySet",
    "EventClassifier",
    "FolderCompletionRecord",
    "FolderSummaryRecord",
    "FolderSummaryService",
    "FolderUnavailableError",
    "ImmediateChannel",
    "LastEventRequest",
    "SchedulerStats",
    "ServiceState",
    "SummaryError",
    "SummaryPublisher",
    "SummaryScheduler",
    "SupervisedTask",
    "Supervisor",
]
