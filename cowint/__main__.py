"""cowint usage:

python -m cowint [options] LHS [OP RHS]

run with --help for more information
"""

import sys

from cowint.tool.calc import main

sys.exit(main())
