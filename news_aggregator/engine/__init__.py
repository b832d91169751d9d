"""Engine components orchestrating parse → ingest/dedup → report → export."""

from .dedup import ArticleStore, IngestOutcome, StoreSnapshot
from .models import Article
from .parser import ArticleParser, ParsedDocument
from .report import Ranked, Report, ReportGenerator
from .thread_pool import DispatchSummary, WorkDispatcher

__all__ = [
    "Article",
    "ArticleParser",
    "ArticleStore",
    "DispatchSummary",
    "IngestOutcome",
    "ParsedDocument",
    "Ranked",
    "Report",
    "ReportGenerator",
    "StoreSnapshot",
    "WorkDispatcher",
]
