#!/usr/bin/env python3
"""Bugzilla Widget - Main entry point.

Fetches a user's bugs from Bugzilla and prints them grouped by category.

================================================================================
DEVELOPER GUIDE: Adding a Category
================================================================================

1. DEFINE THE CATEGORY
   Add a Category to DEFAULT_CATEGORIES in src/bugzilla_widget/categories.py.
   Leave the user email parameters (email1, value0-0-0, value0-0-1) empty;
   they are filled in when the tracked user is set.

       Category("review", "Review requests", _review_parameters, has_pending_review)

2. ENABLE IT
   List it under "categories" in the configuration file:

       categories: [assigned, reported, review]

3. TEST IT
   Drive the list with a fake client returning canned records. See
   tests/test_bug_list.py for examples.

================================================================================
"""

from __future__ import annotations

import sys

from bugzilla_widget.cli import main

if __name__ == "__main__":
    sys.exit(main())
