"""Allow ``python -m busccpy``."""

from busccpy.cli import main

raise SystemExit(main())
