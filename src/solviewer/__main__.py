"""
Run with: python -m solviewer
"""
import sys

from solviewer.main import main

if __name__ == "__main__":
    sys.exit(main())
