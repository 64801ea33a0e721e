"""
Client side of the generator: the issue browser, the generation
orchestrator and the in-memory test case table.
"""
from storycase.client.errors import ClientError, NetworkError, TrackerError, ValidationError
from storycase.client.feedback import FeedbackSink, LoggingFeedback
from storycase.client.issues import IssueBrowser, IssueFilters
from storycase.client.orchestrator import GenerationOrchestrator
from storycase.client.table import TestCaseTable

__all__ = [
    "ClientError",
    "FeedbackSink",
    "GenerationOrchestrator",
    "IssueBrowser",
    "IssueFilters",
    "LoggingFeedback",
    "NetworkError",
    "TestCaseTable",
    "TrackerError",
    "ValidationError",
]
