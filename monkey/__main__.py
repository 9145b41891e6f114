"""CLI: python -m monkey [file]"""

from monkey.main import main

main()
