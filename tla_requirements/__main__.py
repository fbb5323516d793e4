"""Allow running as: python -m tla_requirements"""

from tla_requirements.main import main

if __name__ == "__main__":
    raise SystemExit(main())
