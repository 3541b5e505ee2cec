"""Knowledge bank context assembler.

Turns a workspace's knowledge bank entries into one size-bounded context
block for an LLM prompt.
"""

from kbcontext.config.schema import AppConfig, GenerationType
from kbcontext.entities import DocumentGroup, EntryType, GroupedEntries, KnowledgeBankEntry
from kbcontext.pipelines.assembly import ContextAssembler, build_knowledge_context

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ContextAssembler",
    "DocumentGroup",
    "EntryType",
    "GenerationType",
    "GroupedEntries",
    "KnowledgeBankEntry",
    "build_knowledge_context",
]
