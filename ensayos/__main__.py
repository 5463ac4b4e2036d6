import sys

from ensayos.cli import main

sys.exit(main())
