"""Allow ``python -m binrun``."""

from .cli import main

main()
