"""
Entry point for running the cleanup tool as a module.
"""
from .cli import main

if __name__ == "__main__":
    main()
