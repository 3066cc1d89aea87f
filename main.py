"""
Personal Activity Summary - script entry point.

The CLI lives in `activity_summary.main`; this file keeps
`python main.py ...` working from a source checkout.
"""

from activity_summary.main import main


if __name__ == '__main__':
    exit(main())
