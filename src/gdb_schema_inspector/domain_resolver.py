"""
GDB Schema Inspector — Domain Resolver
=======================================
Fills the domain stubs registered by the definition parser with their
rows from ``GDB_Domains`` and interprets each domain's definition XML as a
coded-value list or a range.

Failure policy (per domain, the run always continues):

- table absent        → the whole domain map is cleared, one warning;
- no matching row     → the stub is removed, one warning;
- domain-kind column  → the lookup that discovers the column is missing
  missing               switches every *later* lookup to the alternate
                        column; the domain that triggered the switch is not
                        retried and stays an unresolved stub;
- anything else       → that domain is removed, one warning.
"""

from __future__ import annotations

import logging
import sqlite3
import xml.etree.ElementTree as ET
from dataclasses import replace

from src.gdb_schema_inspector.catalog_reader import (
    DOMAIN_TYPE_COLUMN,
    DOMAIN_TYPE_FALLBACK_COLUMN,
    DOMAINS_TABLE,
    CatalogReader,
    DomainRecord,
    MissingColumnError,
)
from src.gdb_schema_inspector.models import CodedValue, Domain, DomainType, RangeValue
from src.gdb_schema_inspector.state import (
    STAGE_DOMAINS,
    ExtractionState,
    ExtractionWarning,
    record_warning,
)
from src.gdb_schema_inspector.xml_lookup import (
    child_text,
    first_descendant,
    has_descendant,
    iter_descendants,
    parse_definition,
)

logger = logging.getLogger("gdb_schema_inspector.domain_resolver")

CODED_VALUE_TAG = "CodedValue"
RANGE_TAGS = ("Range", "RangeDomain")
RANGE_MIN_TAGS = ("MinValue", "Min")
RANGE_MAX_TAGS = ("MaxValue", "Max")


def build_domain(name: str, record: DomainRecord) -> Domain:
    """Build a resolved :class:`Domain` from its catalog row.

    The declared kind comes from the domain-kind column; a non-empty
    definition may confirm or override it when it carries ``CodedValue``
    or ``Range`` / ``RangeDomain`` elements.

    Raises:
        xml.etree.ElementTree.ParseError: If the definition is malformed.
    """
    domain_type = DomainType.from_label(record.domain_type)
    coded_values: tuple[CodedValue, ...] | None = None
    range_value: RangeValue | None = None

    if record.definition:
        root = parse_definition(record.definition)
        if record.domain_type == DomainType.CODED_VALUE.value or has_descendant(root, CODED_VALUE_TAG):
            domain_type = DomainType.CODED_VALUE
            coded_values = tuple(
                CodedValue(
                    code=child_text(element, "Code", default=""),
                    name=child_text(element, "Name", default=""),
                )
                for element in iter_descendants(root, CODED_VALUE_TAG)
            )
        elif record.domain_type == DomainType.RANGE.value or has_descendant(root, *RANGE_TAGS):
            domain_type = DomainType.RANGE
            node = first_descendant(root, *RANGE_TAGS)
            if node is not None:
                range_value = RangeValue(
                    min_value=child_text(node, *RANGE_MIN_TAGS, default=""),
                    max_value=child_text(node, *RANGE_MAX_TAGS, default=""),
                )

    return Domain(
        name=name,
        description=record.description,
        field_type=record.field_type,
        domain_type=domain_type,
        coded_values=coded_values,
        range_value=range_value,
        owner=record.owner,
        definition=record.definition,
    )


def resolve_domains(reader: CatalogReader, state: ExtractionState) -> ExtractionState:
    """Resolve every pending domain stub against ``GDB_Domains``.

    Args:
        reader: Open catalog reader.
        state: State carrying the domain stubs.

    Returns:
        A new state whose domain map holds resolved domains (and any stub
        left unresolved by the column fallback), plus warnings.
    """
    if not state.domains:
        return state

    logger.info("Querying %s for %d domain(s)...", DOMAINS_TABLE, len(state.domains))
    if not reader.table_exists(DOMAINS_TABLE):
        warning = record_warning(
            logger,
            STAGE_DOMAINS,
            f"Table '{DOMAINS_TABLE}' not found. Cannot retrieve domain definitions.",
        )
        return replace(state, domains={}).with_warnings(warning)

    domains = dict(state.domains)
    warnings: list[ExtractionWarning] = []
    type_column = DOMAIN_TYPE_COLUMN

    for name in list(domains):
        try:
            record = reader.find_domain(name, type_column)
            if record is None:
                warnings.append(
                    record_warning(logger, STAGE_DOMAINS, f"Domain '{name}' not found in {DOMAINS_TABLE}.")
                )
                del domains[name]
                continue
            domains[name] = build_domain(name, record)
        except MissingColumnError as exc:
            if type_column != DOMAIN_TYPE_COLUMN:
                warnings.append(
                    record_warning(logger, STAGE_DOMAINS, f"Error processing domain '{name}': {exc.message}")
                )
                del domains[name]
                continue
            # Only later lookups use the alternate column; this domain stays a stub.
            type_column = DOMAIN_TYPE_FALLBACK_COLUMN
            warnings.append(
                record_warning(
                    logger,
                    STAGE_DOMAINS,
                    f"Column '{exc.column}' not found in {DOMAINS_TABLE}; using "
                    f"'{DOMAIN_TYPE_FALLBACK_COLUMN}' for subsequent lookups. "
                    f"Domain '{name}' left unresolved.",
                )
            )
        except (sqlite3.Error, ET.ParseError, ValueError) as exc:
            reason = str(exc).split("\n")[0]
            warnings.append(
                record_warning(logger, STAGE_DOMAINS, f"Error processing domain '{name}': {reason}")
            )
            del domains[name]

    logger.info("%d domain(s) kept after resolution.", len(domains))
    return replace(state, domains=domains).with_warnings(*warnings)
