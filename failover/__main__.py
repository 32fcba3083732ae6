import sys

from failover.main import main

sys.exit(main())
