import sys

from locker_lib.cli import main

sys.exit(main())
