import sys

from minebot.main import main

sys.exit(main())
