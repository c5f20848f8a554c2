"""Allow running the CLI with: python -m learniverse.cli"""

from .main import run

if __name__ == "__main__":
    run()
