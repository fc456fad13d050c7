"""Command-line interface for strukscan.

Usage:
    strukscan scan <image> [<image> ...]
    strukscan scan <image> --engine tesseract --json
    strukscan scan <image> --max-width 1200 --quality 80
    strukscan serve [--host] [--port]
"""
