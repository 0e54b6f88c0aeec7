import sys

from protopeek.dump import main

sys.exit(main())
