"""Receipt command handlers used by the CLI."""

import argparse
import json

from strukscan.application.receipts.scan import ReceiptScanRequest, ReceiptScanResult
from strukscan.runtime import get_logger

logger = get_logger(__name__)


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server for receipt scanning."""
    import uvicorn

    from strukscan.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Scan endpoint: http://{args.host}:{args.port}/scan")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0


def _scan_result_payload(scan: ReceiptScanResult) -> dict[str, object]:
    return {
        "source": scan.source,
        "status": scan.status,
        "result": scan.result.to_dict() if scan.result is not None else None,
        "error": scan.error,
    }


def _print_scan_result(scan: ReceiptScanResult) -> None:
    if scan.result is None:
        print(f"Error ({scan.status}): {scan.error}")
        return

    result = scan.result
    print("\n" + "=" * 60)
    print(f"EXTRACTED RECEIPT: {scan.source}")
    print("=" * 60)
    print(f"Merchant: {result.merchant or 'UNKNOWN'}")
    print(f"Date: {result.date or 'UNKNOWN'}")
    if result.amount is not None:
        print(f"Amount: {result.amount} {result.currency or ''}".rstrip())
    else:
        print("Amount: UNKNOWN")
    print(f"Type: {result.transaction_type}")
    print(f"Confidence: {result.confidence:.2f}")
    if scan.status == "enhanced":
        print("Enhancement: applied")
    print(f"\nItems ({len(result.items)}):")
    for i, item in enumerate(result.items, 1):
        qty_str = f"{item.quantity}x " if item.quantity else ""
        print(f"  {i}. {qty_str}{item.name} - {item.price}")
    print("=" * 60)


def cmd_scan(args: argparse.Namespace) -> int:
    """Extract receipt data from each image in order and report the results."""
    from strukscan.application.receipts.scan import run_batch_scan
    from strukscan.runtime import load_receipt_keywords
    from strukscan.runtime.recognizer import RecognizerHandle, create_recognizer_factory

    keywords = load_receipt_keywords()
    requests = [
        ReceiptScanRequest(
            image=image,
            max_width=args.max_width,
            quality=args.quality,
            enhance_url=args.enhance_url,
            keywords=keywords,
        )
        for image in args.images
    ]

    def report_progress(current: int, total: int, scan: ReceiptScanResult) -> None:
        if total > 1 and not args.json:
            print(f"[{current}/{total}] {scan.source}: {scan.status}")

    factory = create_recognizer_factory(args.engine, args.ocr_url)
    with RecognizerHandle(factory) as handle:
        results = run_batch_scan(requests, handle, on_progress=report_progress)

    for scan in results:
        if scan.result is None:
            logger.error("%s: %s", scan.source, scan.error)

    if args.json:
        payload = [_scan_result_payload(scan) for scan in results]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2, ensure_ascii=False))
    else:
        for scan in results:
            _print_scan_result(scan)
        if any(scan.status == "extraction_failed" for scan in results) and args.engine == "service":
            print("Make sure the OCR service is running before scanning receipts.")

    return 0 if all(scan.ok for scan in results) else 1
