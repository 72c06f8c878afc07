"""Normalisation and aggregation of engine output.

The engine writes one JSON object per line (``{"host", "source", "input"}``).
:func:`normalize` turns those lines into :class:`RawDiscoveryRecord` objects
and :class:`ResultAggregator` folds the records into one
:class:`SubdomainResult` per subdomain, in first-seen order.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from pydantic import ValidationError

from subenum.core.models import RawDiscoveryRecord, SubdomainResult

FALLBACK_SOURCE = "subfinder"

_SKIPPED_LINES = {"", "{}"}


def split_output(text: str) -> List[str]:
    """Split raw engine stdout into stripped lines."""
    return [line.strip() for line in text.strip().splitlines()]


def parse_line(line: str) -> RawDiscoveryRecord:
    """Parse one engine output line, falling back to a bare hostname.

    Args:
        line: A single non-empty output line.

    Returns:
        The structured record, or a record with *line* as host and
        :data:`FALLBACK_SOURCE` as source when the line is not a JSON object
        with a string ``host``.
    """
    try:
        return RawDiscoveryRecord.model_validate_json(line)
    except ValidationError:
        return RawDiscoveryRecord(host=line, source=FALLBACK_SOURCE)


def normalize(lines: Iterable[str]) -> List[RawDiscoveryRecord]:
    """Convert engine output lines into discovery records.

    Blank lines and ``{}`` sentinels are skipped. Malformed lines never raise.

    Args:
        lines: Raw output lines in emission order.

    Returns:
        Records in the same order as their lines.
    """
    records: List[RawDiscoveryRecord] = []
    for line in lines:
        line = line.strip()
        if line in _SKIPPED_LINES:
            continue
        records.append(parse_line(line))
    return records


class ResultAggregator:
    """Insertion-ordered fold of discovery records keyed by subdomain.

    Example::

        agg = ResultAggregator()
        agg.extend(normalize(lines))
        results = agg.results()
    """

    def __init__(self) -> None:
        self._sources: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def add(self, record: RawDiscoveryRecord) -> None:
        """Merge a single record into the aggregation."""
        sources = self._sources.setdefault(record.host, [])
        if record.source not in sources:
            sources.append(record.source)

    def extend(self, records: Iterable[RawDiscoveryRecord]) -> None:
        """Merge *records* in order."""
        for record in records:
            self.add(record)

    def results(self) -> List[SubdomainResult]:
        """Return one :class:`SubdomainResult` per subdomain, first-seen first."""
        return [
            SubdomainResult(subdomain=subdomain, sources=list(sources))
            for subdomain, sources in self._sources.items()
        ]


def aggregate(records: Iterable[RawDiscoveryRecord]) -> List[SubdomainResult]:
    """Fold *records* into ordered, source-merged subdomain results."""
    aggregator = ResultAggregator()
    aggregator.extend(records)
    return aggregator.results()
