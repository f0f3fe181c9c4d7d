"""Extraction building blocks shared by every layout variant.

Key exports:
    LabelRule / locate_header: Header label rules and the field locator
    BrandingRules: Brand evidence for generic code labels
    MetadataRules / extract_metadata: Institution and statement-date discovery
    extract_text_records: Transaction blocks from statement text
    VariantMatch / Declined: Matcher outcomes
    CodeRecord / SheetResult: Extraction results

The cascade and the document pipeline live in
:mod:`statement_recon.extractor.cascade` and
:mod:`statement_recon.extractor.pipeline`; they depend on
:mod:`statement_recon.variants` and are imported from there directly.
"""

from statement_recon.extractor.branding import BrandingRules, accept_generic_candidate
from statement_recon.extractor.labels import HeaderScan, LabelRule, build_label_rules, locate_header
from statement_recon.extractor.metadata import MetadataRules, extract_metadata
from statement_recon.extractor.text_extractor import TextPatterns, extract_text_records
from statement_recon.extractor.types import (
    CodeRecord,
    Declined,
    MetadataResult,
    SheetResult,
    VariantMatch,
)

__all__ = [
    "BrandingRules",
    "CodeRecord",
    "Declined",
    "HeaderScan",
    "LabelRule",
    "MetadataResult",
    "MetadataRules",
    "SheetResult",
    "TextPatterns",
    "VariantMatch",
    "accept_generic_candidate",
    "build_label_rules",
    "extract_metadata",
    "extract_text_records",
    "locate_header",
]
