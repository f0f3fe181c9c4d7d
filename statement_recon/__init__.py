"""statement-recon: customer-code extraction and list reconciliation.

The package reads heterogeneous bank and e-wallet statements (spreadsheets
or PDF text), decides which known layout each one follows, pulls out customer
codes with amounts, descriptions and document metadata, and reconciles the
resulting list against a reference list.

Architecture
------------
* ``reader``: pandas workbook reader and pdfplumber text reader.
* ``variants``: one rule-based matcher per institution layout, in cascade order.
* ``extractor``: field locator, branding disambiguator, metadata and text
  transaction extraction, and the document/batch pipeline.
* ``reconcile``: set comparison of two newline-separated code lists.

Configuration
-------------
Layout rules live in ``config/variants.json`` and shared settings in
``config/config.json``. ``CONFIG_DIR`` and ``LOGS_DIR`` may be overridden via
the environment or a ``.env`` file.

Examples
--------
Extract codes from two statements:

    >>> python -m statement_recon.main extract june.xlsx bidv.pdf

Compare a reference list against an extracted statement:

    >>> python -m statement_recon.main compare reference.txt june.xlsx --extract
"""

__version__ = "0.1.0"
__all__ = ["__version__"]


def get_version() -> str:
    """Return the current package version string.

    Returns
    -------
    str
        Semantic version identifier (e.g., ``"0.1.0"``).
    """
    return __version__


__all__.append("get_version")
