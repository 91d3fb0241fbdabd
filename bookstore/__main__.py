"""Allow running the service with ``python -m bookstore``."""

from bookstore.main import main

if __name__ == "__main__":
    main()
