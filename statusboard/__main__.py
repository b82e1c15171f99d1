"""Allow `python -m statusboard`."""

from .cli.main import main

main()
