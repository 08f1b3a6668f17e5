"""Ingestion layer.

Turns the raw upstream document into :class:`CombinationRecord` objects
ready for :meth:`MappingStore.replace_all`.
"""

from emojimash.ingestion.metadata import ParsedMetadata, decode_document, parse_metadata

__all__ = ["ParsedMetadata", "decode_document", "parse_metadata"]
