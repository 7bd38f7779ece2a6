import sys

from rle.rle import main

sys.exit(main())
