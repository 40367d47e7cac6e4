import sys

from whatsnew.cli import main

sys.exit(main())
