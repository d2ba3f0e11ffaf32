"""`streamlit run app.py` entry point for the issues view."""

from __future__ import annotations

from issue_radar.ui.app import main

if __name__ == "__main__":
    main()
