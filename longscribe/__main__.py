"""Package entry point for ``python -m longscribe``.

WHY: Users can run the transcriber as ``python -m longscribe audio.mp3``
without the console script being on PATH.

HOW: Delegates to the CLI's main() function.
"""

import sys

from longscribe.cli import main

if __name__ == "__main__":
    sys.exit(main())
