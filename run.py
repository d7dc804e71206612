import sys

# Run from the project root so that "signtranslator.xxx" imports resolve

if __name__ == "__main__":
    import traceback

    try:
        from signtranslator.main import main
    except ImportError as e:
        print(f"CRITICAL: Could not import signtranslator.main: {e}")
        sys.exit(1)

    try:
        sys.exit(main())
    except Exception:
        traceback.print_exc()
        sys.exit(1)
