# main.py
"""
Entry-point for the USV tracking system.

Equivalent to the installed ``usv-track`` command; see
``usv_tracking/cli.py`` for the options and live-tuning notes.
"""
from usv_tracking.cli import main

if __name__ == "__main__":
    main()
