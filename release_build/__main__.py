"""Allows ``python -m release_build``"""
import sys

from release_build.main import main

if __name__ == "__main__":
    sys.exit(main())
