"""
Content Engine - editable sections of the informational pages.
"""

from unitportal.engines.content.section_service import SectionService, parse_kind

__all__ = [
    "SectionService",
    "parse_kind",
]
