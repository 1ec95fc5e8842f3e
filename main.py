"""Entry point for the folio service executable."""

from folio.service import main

if __name__ == "__main__":
    main()
