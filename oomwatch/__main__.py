# oomwatch/__main__.py
import sys

from oomwatch.main import main

sys.exit(main())
