"""Allow ``python -m liveresolve`` invocation."""

from liveresolve.app import main

if __name__ == "__main__":
    main()
