"""Read-only queries over a document's current content."""

import time
from itertools import islice
from typing import List, Optional, Union

from xml_surgeon.shared.config import QueryConfig
from xml_surgeon.shared.logging import get_logger
from xml_surgeon.tree.indexer import ElementRecord, StructuralIndexer

from .pattern import Pattern, parse_pattern


class QueryExecutor:
    """Compose the structural indexer with the pattern matcher.

    Results are bounded by ``QueryConfig.max_results`` to protect the context
    window of downstream consumers.
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or QueryConfig()
        self.indexer = StructuralIndexer(correlation_id)
        self.logger = get_logger(__name__, correlation_id, "query_executor")

    def query(
        self,
        content: str,
        pattern: Union[str, Pattern],
        limit: Optional[int] = None
    ) -> List[ElementRecord]:
        """Return elements matching ``pattern`` in document order.

        Args:
            content: Document text
            pattern: Pattern string or parsed pattern
            limit: Result cap; defaults to the configured maximum

        Returns:
            Matching records, possibly empty

        Raises:
            MarkupParseError: If the document is malformed
        """
        start_time = time.time()
        if isinstance(pattern, str):
            pattern = parse_pattern(pattern)
        if limit is None:
            limit = self.config.max_results
        if limit < 0:
            raise ValueError("limit must be >= 0")

        records = self.indexer.index(content)
        matches = list(islice(
            (record for record in records if pattern.matches_record(record)),
            limit
        ))

        self.logger.debug(
            "Query executed",
            extra={
                "pattern": str(pattern),
                "match_count": len(matches),
                "limit": limit,
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )
        return matches

    def get_element(self, content: str, exact_path: str) -> Optional[ElementRecord]:
        """Return the first element whose path equals ``exact_path``."""
        for record in self.indexer.index(content):
            if record.path == exact_path:
                return record
        return None
