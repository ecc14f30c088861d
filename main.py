#!/usr/bin/env python3
from burpcert.cli import main


if __name__ == "__main__":
    main()
