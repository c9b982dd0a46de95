"""Interactive BMP editor."""

from bmpedit.menu import main


if __name__ == "__main__":
    main()
