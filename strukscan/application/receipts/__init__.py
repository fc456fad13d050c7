"""Receipt workflows."""

from strukscan.application.receipts.scan import (
    ReceiptScanRequest,
    ReceiptScanResult,
    run_batch_scan,
    run_receipt_scan,
)

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "run_batch_scan",
    "run_receipt_scan",
]
