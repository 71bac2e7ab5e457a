"""Allow ``python -m task_master``."""

from task_master.cli.main import main

if __name__ == "__main__":
    main()
