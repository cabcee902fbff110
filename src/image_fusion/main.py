import sys
from pathlib import Path

from streamlit.web import cli as stcli

APP_PATH: Path = Path(__file__).resolve().with_name("app.py")


def main() -> None:
    """Launch the Image Fusion Streamlit app (``image-fusion`` console script)."""

    print("🧪 Starting Image Fusion…")
    sys.argv = ["streamlit", "run", str(APP_PATH), *sys.argv[1:]]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
