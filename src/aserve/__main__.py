import sys

from aserve.cli._dispatcher import main

sys.exit(main())
