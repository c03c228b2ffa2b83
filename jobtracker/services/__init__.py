from .base import ModelCallCancelled, ModelCallError, ModelClient
from .chat import ChatResponder, should_parse_job
from .extractor import JobExtractor, build_record
from .heuristics import heuristic_extract
from .salvage import extract_json

__all__ = [
    "ModelClient",
    "ModelCallError",
    "ModelCallCancelled",
    "ChatResponder",
    "should_parse_job",
    "JobExtractor",
    "build_record",
    "heuristic_extract",
    "extract_json",
]
