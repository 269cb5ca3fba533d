"""Allow ``python -m helix``."""

from helix.cli import main

main()
