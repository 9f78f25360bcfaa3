import sys

from uil_console.cli import main

sys.exit(main())
