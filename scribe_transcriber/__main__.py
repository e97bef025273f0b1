"""Package entry point for ``python -m scribe_transcriber``."""

from scribe_transcriber.cli import main

if __name__ == "__main__":
    main()
