"""
Ledger rejection mapping: turns a failed submission into LedgerRejection.

Horizon reports a rejected transaction as a problem document:

    {
      "title": "Transaction Failed",
      "status": 400,
      "extras": {
        "result_codes": {"transaction": "tx_failed",
                         "operations": ["op_success", "op_underfunded"]}
      }
    }

The operator sees ``title (result_codes)`` so that both the readable
summary and the machine-readable codes are available for diagnosis.
"""

from __future__ import annotations

import json
from typing import Any

from alfred_please.errors import LedgerRejection
from alfred_please.stellar.client import SubmitResult

_DEFAULT_TITLE = "Transaction Failed"


def _compact_codes(result_codes: dict[str, Any]) -> str:
    # Key-sorted so the same rejection always reads the same.
    return json.dumps(result_codes, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def describe_rejection(title: str | None, result_codes: dict[str, Any] | None) -> str:
    """Render ``title (result_codes)``; codes are compact, key-sorted JSON.

    Either half is dropped when absent.
    """
    title = title or _DEFAULT_TITLE
    if not result_codes:
        return title
    return f"{title} ({_compact_codes(result_codes)})"


def rejection_from_result(result: SubmitResult) -> LedgerRejection:
    """Build the LedgerRejection for a submission that was not accepted."""
    message = describe_rejection(result.title, result.result_codes)
    if result.detail and not result.result_codes:
        message = f"{message}: {result.detail}"
    return LedgerRejection(
        message,
        title=result.title,
        result_codes=result.result_codes,
    )
