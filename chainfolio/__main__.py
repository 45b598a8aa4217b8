"""Command-line entry point for the Chainfolio server."""

from chainfolio.main import run_server


def main():
    """Run the Chainfolio server."""
    run_server()


if __name__ == "__main__":
    main()
