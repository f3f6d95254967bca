import sys

from pluglisp.repl import main

sys.exit(main())
