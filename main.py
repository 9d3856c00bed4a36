"""
Entry point for the Loan Tenure vs Invest comparator.

Usage:
    python main.py              # launches the web app at localhost:5000
    python main.py --cli        # runs the terminal interface
    python main.py --verbose    # debug logging from the comparison engine
"""

import argparse
import logging

import config as cfg


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Loan Tenure Comparison: shorter loan vs longer loan + invest",
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in terminal mode instead of launching the web app",
    )
    parser.add_argument(
        "--pdf",
        default=cfg.REPORT_FILENAME,
        help="Where the CLI writes its PDF report (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cli:
        from cli import run_cli
        run_cli(pdf_path=args.pdf)
    else:
        from app import run_web
        run_web()


if __name__ == "__main__":
    main()
